from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.memory import InMemoryStore
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._store.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        with self._store.lock:
            for user in self._store.users.values():
                if user.email == email:
                    return user
        return None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        avatar: Optional[str] = None,
    ) -> int:
        with self._store.lock:
            if self.get_by_email(email):
                raise ConflictError("A user with this email already exists")
            user = User(
                user_id=self._store.next_id("users"),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                active=True,
                avatar=avatar,
            )
            self._store.users[user.user_id] = user
            return user.user_id

    def update_account(self, user_id: int, *, password_hash: str, role: Role, active: bool) -> bool:
        return self._replace(user_id, password_hash=password_hash, role=role, active=active)

    def set_active(self, user_id: int, *, active: bool) -> bool:
        return self._replace(user_id, active=active)

    def list_all(self) -> Sequence[User]:
        with self._store.lock:
            items = list(self._store.users.values())
        return sorted(items, key=lambda u: (u.name, u.user_id))

    def _replace(self, user_id: int, **changes) -> bool:
        with self._store.lock:
            user = self._store.users.get(int(user_id))
            if user is None:
                return False
            self._store.users[user.user_id] = replace(user, **changes)
            return True

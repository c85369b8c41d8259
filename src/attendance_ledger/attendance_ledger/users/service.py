from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role


def _normalize_email(email: str) -> str:
    email = require_non_empty(email, "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.active:
            logger.warning("Login refused for %s: unknown or inactive user", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            logger.warning("Login refused for %s: bad password", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        password: str,
        role: Role = Role.EMPLOYEE,
        avatar: Optional[str] = None,
    ) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can create users")

        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("A user with this email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            avatar=optional_text(avatar),
        )
        logger.info("User %s (%s) created with role %s", user_id, email, Role(role).value)
        return self.get_user(user_id)

    def disable_user(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can disable users")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError(f"User {user_id} not found")
        if not self._users.set_active(int(user_id), active=False):
            raise NotFoundError(f"User {user_id} not found")
        logger.info("User %s disabled", user_id)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def list_users(self) -> List[User]:
        return list(self._users.list_all())

    def ensure_admin(self, *, email: str, password: str, name: str) -> User:
        """Create the admin account, or promote and reactivate an existing one."""
        email = _normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        password_hash = generate_password_hash(password)

        existing = self._users.get_by_email(email)
        if existing:
            self._users.update_account(existing.user_id, password_hash=password_hash, role=Role.ADMIN, active=True)
            logger.info("Admin account %s already exists; role and status refreshed", email)
            return self.get_user(existing.user_id)

        user_id = self._users.create_user(
            name=require_non_empty(name, "Name"),
            email=email,
            password_hash=password_hash,
            role=Role.ADMIN,
        )
        logger.info("Admin account %s created", email)
        return self.get_user(user_id)

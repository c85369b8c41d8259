from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        avatar: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_account(self, user_id: int, *, password_hash: str, role: Role, active: bool) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, active: bool) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """All users ordered by name."""

        raise NotImplementedError

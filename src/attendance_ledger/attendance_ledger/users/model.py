from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access). `active=False` disables login
    but keeps the user's history.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    active: bool = True
    avatar: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_SELECT = "SELECT id, name, email, password_hash, role, active, avatar FROM users"


def _user_from_row(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        active=bool(row.get("active", True)),
        avatar=row.get("avatar"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _user_from_row(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE email=%s", (email,))
            row = fetchone(cur)
            return _user_from_row(row) if row else None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        avatar: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO users(name, email, password_hash, role, active, avatar)
                    VALUES(%s,%s,%s,%s,1,%s)
                    """,
                    (name, email, password_hash, role.value, avatar),
                )
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                raise ConflictError("A user with this email already exists") from e
            return int(cur.lastrowid)

    def update_account(self, user_id: int, *, password_hash: str, role: Role, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET password_hash=%s, role=%s, active=%s WHERE id=%s",
                (password_hash, role.value, 1 if active else 0, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET active=%s WHERE id=%s", (1 if active else 0, int(user_id)))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY name ASC, id ASC")
            return [_user_from_row(r) for r in fetchall(cur)]

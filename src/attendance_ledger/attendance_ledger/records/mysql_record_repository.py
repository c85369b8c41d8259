from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .mapping import RECORD_COLUMNS, record_from_row
from .model import TimeRecord
from .repository import RecordRepository

_SELECT = f"SELECT {', '.join(RECORD_COLUMNS)} FROM time_records"


class MySQLRecordRepository(RecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (int(record_id),))
            r = fetchone(cur)
            return record_from_row(r) if r else None

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        active_only: bool = False,
    ) -> Sequence[TimeRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date<=%s")
            params.append(end_date)
        if active_only:
            clauses.append("check_out IS NULL")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY work_date DESC, check_in DESC, id DESC
                """,
                tuple(params),
            )
            return [record_from_row(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: str,
        notes: Optional[str] = None,
    ) -> TimeRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO time_records(user_id, work_date, check_in, check_out, notes)
                    VALUES(%s,%s,%s,NULL,%s)
                    """,
                    (int(user_id), work_date, check_in, notes),
                )
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                # uq_time_records_open: another open session for this user/day
                raise ConflictError("An active session already exists for today") from e
            record_id = int(cur.lastrowid)

        return TimeRecord(
            record_id=record_id,
            user_id=int(user_id),
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            notes=notes,
        )

    def update_checkout(
        self,
        *,
        record_id: int,
        check_out: str,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET check_out=%s, notes=%s
                WHERE id=%s AND check_out IS NULL
                """,
                (check_out, notes, int(record_id)),
            )
            return cur.rowcount > 0

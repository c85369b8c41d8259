from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import RequestStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..records.mapping import record_to_row
from ..records.model import TimeRecord
from .mapping import REQUEST_COLUMNS, request_from_row, request_to_row
from .model import ChangeRequest
from .repository import ChangeRequestRepository

_SELECT = f"SELECT {', '.join(REQUEST_COLUMNS)} FROM change_requests"


class MySQLChangeRequestRepository(ChangeRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        record_id: int,
        user_id: int,
        user_name: str,
        original_check_in: str,
        original_check_out: Optional[str],
        suggested_check_in: str,
        suggested_check_out: Optional[str],
        work_date: date,
        reason: str,
        created_at: datetime,
    ) -> ChangeRequest:
        request = ChangeRequest(
            request_id=0,
            record_id=int(record_id),
            user_id=int(user_id),
            user_name=user_name,
            original_check_in=original_check_in,
            original_check_out=original_check_out,
            suggested_check_in=suggested_check_in,
            suggested_check_out=suggested_check_out,
            work_date=work_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )
        row = request_to_row(request)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO change_requests(
                    record_id, user_id, user_name,
                    original_check_in, original_check_out,
                    suggested_check_in, suggested_check_out,
                    work_date, reason, status, created_at
                )
                VALUES(
                    %(record_id)s, %(user_id)s, %(user_name)s,
                    %(original_check_in)s, %(original_check_out)s,
                    %(suggested_check_in)s, %(suggested_check_out)s,
                    %(work_date)s, %(reason)s, %(status)s, %(created_at)s
                )
                """,
                row,
            )
            return replace(request, request_id=int(cur.lastrowid))

    def get(self, *, request_id: int) -> Optional[ChangeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return request_from_row(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ChangeRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [request_from_row(r) for r in fetchall(cur)]

    def approve(
        self,
        *,
        request_id: int,
        decided_by: int,
        decided_at: datetime,
        record: TimeRecord,
    ) -> bool:
        row = record_to_row(record)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE change_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE id=%s AND status=%s
                """,
                (
                    RequestStatus.APPROVED.value,
                    int(decided_by),
                    decided_at,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False

            try:
                cur.execute(
                    """
                    UPDATE time_records
                    SET check_in=%(check_in)s, check_out=%(check_out)s
                    WHERE id=%(id)s
                    """,
                    row,
                )
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                # Reopening collided with another open session (uq_time_records_open).
                raise ConflictError("The user already has an active session on that day") from e
            if cur.rowcount == 0:
                # Raising inside the block rolls back the status change too.
                raise NotFoundError(f"Time record {record.record_id} not found")
            return True

    def reject(self, *, request_id: int, decided_by: int, decided_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE change_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE id=%s AND status=%s
                """,
                (
                    RequestStatus.REJECTED.value,
                    int(decided_by),
                    decided_at,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

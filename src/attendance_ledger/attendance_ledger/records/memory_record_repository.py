from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.memory import InMemoryStore
from ..ledger.policy import derive_active_record, sort_records
from .model import TimeRecord
from .repository import RecordRepository


class InMemoryRecordRepository(RecordRepository):
    """Record storage kept in an InMemoryStore (tests, demos)."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        return self._store.time_records.get(int(record_id))

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        active_only: bool = False,
    ) -> Sequence[TimeRecord]:
        with self._store.lock:
            items = list(self._store.time_records.values())

        if user_id is not None:
            items = [r for r in items if r.user_id == int(user_id)]
        if start_date is not None:
            items = [r for r in items if r.work_date >= start_date]
        if end_date is not None:
            items = [r for r in items if r.work_date <= end_date]
        if active_only:
            items = [r for r in items if r.check_out is None]
        return sort_records(items)

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: str,
        notes: Optional[str] = None,
    ) -> TimeRecord:
        with self._store.lock:
            # Same guarantee as the unique open-session key in the SQL schema.
            if derive_active_record(self._store.time_records.values(), int(user_id), work_date):
                raise ConflictError("An active session already exists for today")

            record = TimeRecord(
                record_id=self._store.next_id("time_records"),
                user_id=int(user_id),
                work_date=work_date,
                check_in=check_in,
                check_out=None,
                notes=notes,
            )
            self._store.time_records[record.record_id] = record
            return record

    def update_checkout(
        self,
        *,
        record_id: int,
        check_out: str,
        notes: Optional[str] = None,
    ) -> bool:
        with self._store.lock:
            current = self._store.time_records.get(int(record_id))
            if current is None or current.check_out is not None:
                return False
            self._store.time_records[current.record_id] = replace(current, check_out=check_out, notes=notes)
            return True

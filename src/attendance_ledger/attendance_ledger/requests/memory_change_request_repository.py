from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.memory import InMemoryStore
from ..ledger.policy import derive_active_record
from ..records.model import TimeRecord
from .model import ChangeRequest
from .repository import ChangeRequestRepository


class InMemoryChangeRequestRepository(ChangeRequestRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

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
        with self._store.lock:
            request = ChangeRequest(
                request_id=self._store.next_id("change_requests"),
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
            self._store.change_requests[request.request_id] = request
            return request

    def get(self, *, request_id: int) -> Optional[ChangeRequest]:
        return self._store.change_requests.get(int(request_id))

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ChangeRequest]:
        with self._store.lock:
            items = list(self._store.change_requests.values())

        if status is not None:
            items = [r for r in items if r.status == status]
        if user_id is not None:
            items = [r for r in items if r.user_id == int(user_id)]
        items.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return items[: int(limit)]

    def approve(
        self,
        *,
        request_id: int,
        decided_by: int,
        decided_at: datetime,
        record: TimeRecord,
    ) -> bool:
        with self._store.lock:
            current = self._store.change_requests.get(int(request_id))
            if current is None or current.status != RequestStatus.PENDING:
                return False
            if record.record_id not in self._store.time_records:
                raise NotFoundError(f"Time record {record.record_id} not found")
            if record.check_out is None:
                others = [r for r in self._store.time_records.values() if r.record_id != record.record_id]
                if derive_active_record(others, record.user_id, record.work_date):
                    raise ConflictError("The user already has an active session on that day")

            self._store.time_records[record.record_id] = record
            self._store.change_requests[current.request_id] = replace(
                current,
                status=RequestStatus.APPROVED,
                decided_by=int(decided_by),
                decided_at=decided_at,
            )
            return True

    def reject(self, *, request_id: int, decided_by: int, decided_at: datetime) -> bool:
        with self._store.lock:
            current = self._store.change_requests.get(int(request_id))
            if current is None or current.status != RequestStatus.PENDING:
                return False
            self._store.change_requests[current.request_id] = replace(
                current,
                status=RequestStatus.REJECTED,
                decided_by=int(decided_by),
                decided_at=decided_at,
            )
            return True

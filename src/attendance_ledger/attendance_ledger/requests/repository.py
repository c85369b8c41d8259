from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from ..records.model import TimeRecord
from .model import ChangeRequest


class ChangeRequestRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[ChangeRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ChangeRequest]:
        """Newest first (created_at descending)."""

        raise NotImplementedError

    def approve(
        self,
        *,
        request_id: int,
        decided_by: int,
        decided_at: datetime,
        record: TimeRecord,
    ) -> bool:
        """Mark the request approved and overwrite `record` in one transaction.

        The status change only happens while the request is still pending;
        returns False otherwise and writes nothing. Raises NotFoundError
        (after rolling back) if the record no longer exists.
        """

        raise NotImplementedError

    def reject(self, *, request_id: int, decided_by: int, decided_at: datetime) -> bool:
        """Mark the request rejected if it is still pending."""

        raise NotImplementedError

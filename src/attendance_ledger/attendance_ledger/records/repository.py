from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import TimeRecord


class RecordRepository(Protocol):
    """Storage interface for time records.

    Every list method returns records ordered by date descending, then
    check-in descending.
    """

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        active_only: bool = False,
    ) -> Sequence[TimeRecord]:
        """Filters combine with AND; date bounds are inclusive."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: str,
        notes: Optional[str] = None,
    ) -> TimeRecord:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        record_id: int,
        check_out: str,
        notes: Optional[str] = None,
    ) -> bool:
        """Set the check-out only while it is still empty.

        Returns False when the record is missing or already checked out.
        """

        raise NotImplementedError

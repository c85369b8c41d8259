from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class ChangeRequest:
    """Proposed correction to a completed time record.

    `original_*` are snapshotted when the request is created and are never
    re-read from the live record.
    """

    request_id: int
    record_id: int
    user_id: int
    user_name: str
    original_check_in: str
    original_check_out: Optional[str]
    suggested_check_in: str
    suggested_check_out: Optional[str]
    work_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

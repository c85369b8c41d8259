from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: one work session.

    `check_in` / `check_out` are zero-padded "HH:MM" strings; a record with
    no check-out is the user's active session for `work_date`.
    """

    record_id: int
    user_id: int
    work_date: date
    check_in: str
    check_out: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.check_out is None

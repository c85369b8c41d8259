"""Ledger rules shared by the record and change-request services.

Everything here is pure: no store access, no clock. Callers pass in the
records they loaded and the day they consider "today".
"""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional, Tuple

from ..core.exceptions import ValidationError
from ..records.model import TimeRecord
from ..requests.model import ChangeRequest

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Split "HH:MM" (seconds tolerated and ignored) into (hour, minute)."""
    match = _HHMM.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")
    return hour, minute


def normalize_hhmm(value: str) -> str:
    hour, minute = parse_hhmm(value)
    return f"{hour:02d}:{minute:02d}"


def is_valid_time_range(check_in: str, check_out: Optional[str]) -> bool:
    """True when `check_out` is absent or strictly later than `check_in`.

    Same-day only: a check-out earlier on the clock than the check-in is
    rejected even if it was meant as the next day.
    """
    if not check_out:
        return True

    in_hour, in_minute = parse_hhmm(check_in)
    out_hour, out_minute = parse_hhmm(check_out)

    if out_hour < in_hour:
        return False
    if out_hour == in_hour and out_minute <= in_minute:
        return False
    return True


def derive_today_records(records: Iterable[TimeRecord], user_id: int, today: date) -> List[TimeRecord]:
    """Records of `user_id` dated `today`, newest check-in first."""
    todays = [r for r in records if r.user_id == user_id and r.work_date == today]
    # HH:MM is zero-padded, so string order is clock order.
    todays.sort(key=lambda r: (r.check_in, r.record_id), reverse=True)
    return todays


def derive_active_record(records: Iterable[TimeRecord], user_id: int, today: date) -> Optional[TimeRecord]:
    """The open session of `user_id` for `today`, or None.

    More than one open session should not exist; if it does, the lowest
    record id wins.
    """
    active = [r for r in records if r.user_id == user_id and r.work_date == today and r.check_out is None]
    if not active:
        return None
    return min(active, key=lambda r: r.record_id)


def sort_records(records: Iterable[TimeRecord]) -> List[TimeRecord]:
    """Date descending, then check-in descending."""
    return sorted(records, key=lambda r: (r.work_date, r.check_in, r.record_id), reverse=True)


def apply_approval(record: TimeRecord, request: ChangeRequest) -> TimeRecord:
    """Copy of `record` carrying the request's suggested times."""
    return replace(
        record,
        check_in=request.suggested_check_in,
        check_out=request.suggested_check_out,
    )

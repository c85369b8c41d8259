from __future__ import annotations

from datetime import date, datetime

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def clock_time(moment: datetime) -> str:
    """Time-of-day of `moment` as zero-padded HH:MM."""
    return moment.strftime(TIME_FORMAT)

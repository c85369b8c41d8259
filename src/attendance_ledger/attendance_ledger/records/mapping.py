"""Row <-> domain mapping for `time_records`.

Column names differ from the entity (`id` vs `record_id`) and TIME columns
come back from the driver in several shapes; this is the only place that
knows about either.
"""

from __future__ import annotations

from typing import Any, Dict

from ..database.mysql_base import mysql_time_to_hhmm
from .model import TimeRecord

RECORD_COLUMNS = ("id", "user_id", "work_date", "check_in", "check_out", "notes")


def record_from_row(row: Dict[str, Any]) -> TimeRecord:
    return TimeRecord(
        record_id=int(row["id"]),
        user_id=int(row["user_id"]),
        work_date=row["work_date"],
        check_in=mysql_time_to_hhmm(row["check_in"]),
        check_out=mysql_time_to_hhmm(row.get("check_out")),
        notes=row.get("notes"),
    )


def record_to_row(record: TimeRecord) -> Dict[str, Any]:
    return {
        "id": record.record_id,
        "user_id": record.user_id,
        "work_date": record.work_date,
        "check_in": record.check_in,
        "check_out": record.check_out,
        "notes": record.notes,
    }

from __future__ import annotations

from typing import Any, Dict

from ..core.enums import RequestStatus
from ..database.mysql_base import mysql_time_to_hhmm
from .model import ChangeRequest

REQUEST_COLUMNS = (
    "id",
    "record_id",
    "user_id",
    "user_name",
    "original_check_in",
    "original_check_out",
    "suggested_check_in",
    "suggested_check_out",
    "work_date",
    "reason",
    "status",
    "created_at",
    "decided_by",
    "decided_at",
)


def request_from_row(row: Dict[str, Any]) -> ChangeRequest:
    decided_by = row.get("decided_by")
    return ChangeRequest(
        request_id=int(row["id"]),
        record_id=int(row["record_id"]),
        user_id=int(row["user_id"]),
        user_name=row["user_name"],
        original_check_in=mysql_time_to_hhmm(row["original_check_in"]),
        original_check_out=mysql_time_to_hhmm(row.get("original_check_out")),
        suggested_check_in=mysql_time_to_hhmm(row["suggested_check_in"]),
        suggested_check_out=mysql_time_to_hhmm(row.get("suggested_check_out")),
        work_date=row["work_date"],
        reason=row["reason"],
        status=RequestStatus(row["status"]),
        created_at=row["created_at"],
        decided_by=int(decided_by) if decided_by is not None else None,
        decided_at=row.get("decided_at"),
    )


def request_to_row(request: ChangeRequest) -> Dict[str, Any]:
    return {
        "id": request.request_id,
        "record_id": request.record_id,
        "user_id": request.user_id,
        "user_name": request.user_name,
        "original_check_in": request.original_check_in,
        "original_check_out": request.original_check_out,
        "suggested_check_in": request.suggested_check_in,
        "suggested_check_out": request.suggested_check_out,
        "work_date": request.work_date,
        "reason": request.reason,
        "status": request.status.value,
        "created_at": request.created_at,
        "decided_by": request.decided_by,
        "decided_at": request.decided_at,
    }

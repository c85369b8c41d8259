from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime, time, timedelta

from attendance_ledger.core.enums import RequestStatus
from attendance_ledger.records.mapping import RECORD_COLUMNS, record_from_row, record_to_row
from attendance_ledger.records.model import TimeRecord
from attendance_ledger.requests.mapping import REQUEST_COLUMNS, request_from_row, request_to_row
from attendance_ledger.requests.model import ChangeRequest


def test_record_row_with_driver_time_shapes():
    row = {
        "id": 7,
        "user_id": 3,
        "work_date": date(2026, 2, 2),
        "check_in": timedelta(hours=8, minutes=5),
        "check_out": "17:30:00",
        "notes": None,
    }

    rec = record_from_row(row)

    assert rec == TimeRecord(
        record_id=7, user_id=3, work_date=date(2026, 2, 2), check_in="08:05", check_out="17:30", notes=None
    )


def test_record_row_open_session_keeps_null_check_out():
    rec = record_from_row(
        {"id": 1, "user_id": 1, "work_date": date(2026, 2, 2), "check_in": time(9, 0), "check_out": None}
    )
    assert rec.check_out is None
    assert rec.notes is None


def test_record_to_row_covers_every_column():
    rec = TimeRecord(record_id=1, user_id=2, work_date=date(2026, 2, 2), check_in="08:00", check_out="12:00")
    row = record_to_row(rec)

    assert set(row) == set(RECORD_COLUMNS)
    assert len(RECORD_COLUMNS) == len(fields(TimeRecord))
    assert record_from_row(row) == rec


def test_request_row_mapping_covers_every_field():
    req = ChangeRequest(
        request_id=4,
        record_id=1,
        user_id=2,
        user_name="Ana",
        original_check_in="08:00",
        original_check_out="17:00",
        suggested_check_in="08:15",
        suggested_check_out=None,
        work_date=date(2026, 2, 2),
        reason="forgot to punch",
        status=RequestStatus.APPROVED,
        created_at=datetime(2026, 2, 2, 18, 0),
        decided_by=9,
        decided_at=datetime(2026, 2, 3, 9, 0),
    )
    row = request_to_row(req)

    assert set(row) == set(REQUEST_COLUMNS)
    assert len(REQUEST_COLUMNS) == len(fields(ChangeRequest))
    assert row["status"] == "approved"
    assert request_from_row(row) == req

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from ..common.datetime_utils import clock_time, now_local
from ..common.validators import optional_text
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, InvalidRangeError, NotFoundError, ValidationError
from ..ledger.policy import derive_active_record, derive_today_records, is_valid_time_range
from .model import TimeRecord
from .repository import RecordRepository

logger = logging.getLogger(__name__)


class RecordService:
    """Use cases around a user's work sessions (check-in, check-out, history)."""

    def __init__(self, records: RecordRepository):
        self._records = records

    # -------- Mutations --------
    def check_in(self, user_id: int, notes: Optional[str] = None, *, now: datetime | None = None) -> TimeRecord:
        now = now or now_local()
        today = now.date()

        todays = self._records.list_records(user_id=int(user_id), start_date=today, end_date=today)
        if derive_active_record(todays, int(user_id), today):
            logger.warning("Check-in refused for user %s: active session exists", user_id)
            raise ConflictError("An active session already exists for today")

        record = self._records.create_checkin(
            user_id=int(user_id),
            work_date=today,
            check_in=clock_time(now),
            notes=optional_text(notes),
        )
        logger.info("User %s checked in at %s (record %s)", user_id, record.check_in, record.record_id)
        return record

    def check_out(
        self,
        user_id: int,
        record_id: int,
        notes: Optional[str] = None,
        *,
        now: datetime | None = None,
        current_role: Role = Role.EMPLOYEE,
    ) -> TimeRecord:
        now = now or now_local()
        check_out = clock_time(now)

        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Time record {record_id} not found")
        if record.user_id != int(user_id) and current_role != Role.ADMIN:
            raise AuthorizationError("You can only check out of your own session")
        if record.check_out is not None:
            raise ConflictError("This session is already checked out")
        if not is_valid_time_range(record.check_in, check_out):
            logger.warning(
                "Check-out refused for record %s: %s is not after %s", record.record_id, check_out, record.check_in
            )
            raise InvalidRangeError(f"Check-out {check_out} must be after check-in {record.check_in}")

        merged_notes = optional_text(notes) or record.notes
        updated = self._records.update_checkout(record_id=record.record_id, check_out=check_out, notes=merged_notes)
        if not updated:
            # Lost a race with another check-out between the read and the write.
            raise ConflictError("This session is already checked out")

        logger.info("User %s checked out at %s (record %s)", user_id, check_out, record.record_id)
        return TimeRecord(
            record_id=record.record_id,
            user_id=record.user_id,
            work_date=record.work_date,
            check_in=record.check_in,
            check_out=check_out,
            notes=merged_notes,
        )

    # -------- Queries --------
    def get_record(self, record_id: int) -> TimeRecord:
        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Time record {record_id} not found")
        return record

    def get_all_records(self) -> List[TimeRecord]:
        return list(self._records.list_records())

    def get_all_records_between(self, start_date: date, end_date: date) -> List[TimeRecord]:
        self._check_range(start_date, end_date)
        return list(self._records.list_records(start_date=start_date, end_date=end_date))

    def get_user_records(self, user_id: int) -> List[TimeRecord]:
        return list(self._records.list_records(user_id=int(user_id)))

    def get_user_records_between(self, user_id: int, start_date: date, end_date: date) -> List[TimeRecord]:
        self._check_range(start_date, end_date)
        return list(self._records.list_records(user_id=int(user_id), start_date=start_date, end_date=end_date))

    def get_today_records(self, user_id: int, today: date | None = None) -> List[TimeRecord]:
        today = today or now_local().date()
        todays = self._records.list_records(user_id=int(user_id), start_date=today, end_date=today)
        return derive_today_records(todays, int(user_id), today)

    def get_active_record(self, user_id: int, today: date | None = None) -> Optional[TimeRecord]:
        today = today or now_local().date()
        open_records = self._records.list_records(
            user_id=int(user_id), start_date=today, end_date=today, active_only=True
        )
        return derive_active_record(open_records, int(user_id), today)

    def has_active_check_in(self, user_id: int, today: date | None = None) -> bool:
        return self.get_active_record(user_id, today) is not None

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

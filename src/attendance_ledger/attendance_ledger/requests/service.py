from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, InvalidRangeError, NotFoundError
from ..ledger.policy import apply_approval, derive_active_record, is_valid_time_range, normalize_hhmm
from ..records.repository import RecordRepository
from .model import ChangeRequest
from .repository import ChangeRequestRepository

logger = logging.getLogger(__name__)


class ChangeRequestService:
    """Corrections to completed time records.

    A request moves exactly once from PENDING to APPROVED or REJECTED.
    Deciding an already decided request is a ConflictError, never a silent
    re-apply.
    """

    def __init__(self, requests: ChangeRequestRepository, records: RecordRepository):
        self._requests = requests
        self._records = records

    def create(
        self,
        *,
        record_id: int,
        user_id: int,
        user_name: str,
        suggested_check_in: str,
        suggested_check_out: Optional[str],
        reason: str,
        current_role: Role = Role.EMPLOYEE,
        now: datetime | None = None,
    ) -> ChangeRequest:
        suggested_in = normalize_hhmm(suggested_check_in)
        suggested_out = normalize_hhmm(suggested_check_out) if optional_text(suggested_check_out) else None
        reason = require_non_empty(reason, "Reason")
        user_name = require_non_empty(user_name, "User name")

        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Time record {record_id} not found")
        if record.user_id != int(user_id) and current_role != Role.ADMIN:
            raise AuthorizationError("You can only request changes to your own records")
        if record.check_out is None:
            raise ConflictError("Check out before requesting a change to this session")
        if not is_valid_time_range(suggested_in, suggested_out):
            raise InvalidRangeError(f"Suggested check-out {suggested_out} must be after check-in {suggested_in}")

        request = self._requests.create(
            record_id=record.record_id,
            user_id=int(user_id),
            user_name=user_name,
            original_check_in=record.check_in,
            original_check_out=record.check_out,
            suggested_check_in=suggested_in,
            suggested_check_out=suggested_out,
            work_date=record.work_date,
            reason=reason,
            created_at=now or now_local(),
        )
        logger.info("Change request %s created for record %s by user %s", request.request_id, record.record_id, user_id)
        return request

    def approve(
        self,
        request_id: int,
        *,
        admin_user_id: int,
        current_role: Role = Role.ADMIN,
        now: datetime | None = None,
    ) -> ChangeRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can approve change requests")

        req = self._load_pending(request_id)

        record = self._records.get_by_id(req.record_id)
        if not record:
            raise NotFoundError(f"Time record {req.record_id} not found")
        if not is_valid_time_range(req.suggested_check_in, req.suggested_check_out):
            raise InvalidRangeError("Suggested check-out must be after check-in")

        if req.suggested_check_out is None and record.check_out is not None:
            # Reopening a session must not create a second active one that day.
            siblings = self._records.list_records(
                user_id=record.user_id, start_date=record.work_date, end_date=record.work_date, active_only=True
            )
            if derive_active_record(siblings, record.user_id, record.work_date):
                raise ConflictError("The user already has an active session on that day")

        updated = apply_approval(record, req)
        decided_at = now or now_local()
        if not self._requests.approve(
            request_id=req.request_id,
            decided_by=int(admin_user_id),
            decided_at=decided_at,
            record=updated,
        ):
            logger.warning("Approval of change request %s lost to a concurrent decision", req.request_id)
            raise ConflictError("This change request has already been decided")

        logger.info("Change request %s approved by admin %s", req.request_id, admin_user_id)
        return self._requests.get(request_id=req.request_id)

    def reject(
        self,
        request_id: int,
        *,
        admin_user_id: int,
        current_role: Role = Role.ADMIN,
        now: datetime | None = None,
    ) -> ChangeRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can reject change requests")

        req = self._load_pending(request_id)

        if not self._requests.reject(
            request_id=req.request_id,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
        ):
            logger.warning("Rejection of change request %s lost to a concurrent decision", req.request_id)
            raise ConflictError("This change request has already been decided")

        logger.info("Change request %s rejected by admin %s", req.request_id, admin_user_id)
        return self._requests.get(request_id=req.request_id)

    def get(self, request_id: int) -> ChangeRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFoundError(f"Change request {request_id} not found")
        return req

    def list_pending(self, *, limit: int = DEFAULT_LIST_LIMIT) -> List[ChangeRequest]:
        return list(self._requests.list_requests(status=RequestStatus.PENDING, limit=limit))

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> List[ChangeRequest]:
        return list(self._requests.list_requests(user_id=int(user_id), limit=limit))

    def _load_pending(self, request_id: int) -> ChangeRequest:
        req = self.get(request_id)
        if not req.is_pending:
            raise ConflictError(f"This change request is already {req.status.value}")
        return req

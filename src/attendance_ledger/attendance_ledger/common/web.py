"""Flask glue shared by the feature controllers."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, current_app, jsonify, request, session

from ..core.constants import DATE_FORMAT, DATETIME_FORMAT
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error)
        return jsonify({"error": error.kind, "message": str(error)}), status


def to_json(value: Any) -> Any:
    """Dataclasses/enums/dates -> JSON-friendly values (dates as ISO strings)."""
    if is_dataclass(value) and not isinstance(value, type):
        return {k: to_json(v) for k, v in asdict(value).items() if k != "password_hash"}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return value


def request_data() -> dict:
    """JSON body if present, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.EMPLOYEE.value))


def _require_active_user():
    """Reload the session user; a disabled account is logged out on its next request."""
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")

    users = current_app.extensions["attendance_ledger"].users_repo
    user = users.get_by_id(int(session["user_id"]))
    if not user or not user.active:
        session.clear()
        raise AuthenticationError("Your account is no longer active")

    session["role"] = user.role.value
    return user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _require_active_user()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if _require_active_user().role != Role.ADMIN:
            raise AuthorizationError("Administrator access required")
        return view(*args, **kwargs)

    return wrapper

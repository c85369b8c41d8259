from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role, used for authorization only."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class RequestStatus(str, Enum):
    """Change request workflow state. Only PENDING may transition."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

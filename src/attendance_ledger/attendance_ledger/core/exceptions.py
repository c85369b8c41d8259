class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class InvalidRangeError(ValidationError):
    """Raised when a check-out is not strictly after its check-in."""

    kind = "invalid_range"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "authorization_error"


class NotFoundError(DomainError):
    """Raised when a referenced record, request or user does not exist."""

    kind = "not_found"


class ConflictError(DomainError):
    """Raised when the current state forbids the action (duplicate check-in,
    repeated check-out, deciding an already decided request)."""

    kind = "conflict"


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot be reached or fails mid-operation.

    Callers may retry.
    """

    kind = "store_unavailable"

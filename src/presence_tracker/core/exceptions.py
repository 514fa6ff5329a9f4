class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a date or time range ends before it starts."""


class MissingTimeWindowError(ValidationError):
    """Raised when a Half/Permission leave lacks its start or end time."""


class StateConflictError(DomainError):
    """Raised for stale or repeated requests. Callers should not blindly retry."""


class DuplicatePunchError(StateConflictError):
    pass


class NoOpenPunchError(StateConflictError):
    pass


class NegativeDurationError(StateConflictError):
    pass


class AlreadyDecidedError(StateConflictError):
    pass


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when the caller's identity cannot be established."""


class InvalidTokenError(AuthenticationError):
    pass


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ForbiddenError(AuthorizationError):
    pass


class StoreError(Exception):
    """Raised when the backing store fails. Propagated as-is, never retried here."""

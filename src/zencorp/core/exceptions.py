class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTransitionError(ValidationError):
    """Raised when a task status change is not an edge of the workflow."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConcurrencyError(DomainError):
    """Raised when a record changed since it was read (stale version)."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

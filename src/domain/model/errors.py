"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the caller."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class UnauthorizedError(DomainError):
    """Caller has no valid identity."""


class InvalidCredentialsError(UnauthorizedError):
    """Email/password pair did not match a registered user."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class StoreError(DomainError):
    """The backing store failed while serving a request."""

"""Error taxonomy shared by every LearnHub package.

Each failure is a ``DomainException`` carrying a user-safe message and a
stable ``ErrorCode``. The HTTP layer turns codes into status codes in one
place (``learnhub.presentation.api.exception_handlers``), so services raise
these and never build responses themselves.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable codes returned to API clients.

    Clients branch on these values; treat them as a public contract.
    """

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"

    # 401
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"

    # 403
    FORBIDDEN = "FORBIDDEN"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"

    # 404
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # 409
    CONFLICT = "CONFLICT"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    OAUTH_IDENTITY_ALREADY_LINKED = "OAUTH_IDENTITY_ALREADY_LINKED"

    # 502 / 503
    OAUTH_PROVIDER_ERROR = "OAUTH_PROVIDER_ERROR"
    OAUTH_NOT_CONFIGURED = "OAUTH_NOT_CONFIGURED"

    # 500
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Root of the hierarchy.

    Subclasses pick their defaults through ``default_message`` and
    ``default_code``; callers may still override both.

    Attributes
    ----------
    message
        Text that is safe to show to end users
    code
        The ``ErrorCode`` clients see
    details
        Extra context for the logs; never sent to clients
    """

    default_message = "An internal error occurred"
    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, "
            f"code={self.code.value}, details={self.details!r})"
        )


class ValidationError(DomainException):
    """Input that breaks a domain rule."""

    default_message = "Validation error"
    default_code = ErrorCode.VALIDATION_ERROR


class AuthenticationError(DomainException):
    """The caller's identity could not be established."""

    default_message = "Not authenticated"
    default_code = ErrorCode.AUTHENTICATION_REQUIRED


class AuthorizationError(DomainException):
    """The caller is known but not allowed to do this."""

    default_message = "Insufficient permissions"
    default_code = ErrorCode.FORBIDDEN


class EntityNotFoundError(DomainException):
    default_message = "Not found"
    default_code = ErrorCode.ENTITY_NOT_FOUND


class ConflictError(DomainException):
    """A write would collide with existing state (duplicate key and the like)."""

    default_message = "Conflict"
    default_code = ErrorCode.CONFLICT


class InternalError(DomainException):
    """Storage, hashing or signing failed unexpectedly."""

"""Identity and authentication exceptions.

These exceptions are raised by the learnhub_identity package and are
mapped to HTTP responses by the presentation layer's exception handlers.
"""

from learnhub.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainException,
    ErrorCode,
    ValidationError,
)


class AuthError(AuthenticationError):
    """Base exception for all authentication errors."""

    def __init__(
        self,
        message: str = "Authentication error",
        code: ErrorCode = ErrorCode.AUTHENTICATION_REQUIRED,
    ):
        super().__init__(message, code)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed.

    ``reason`` distinguishes the failure kind for logging only; callers
    treat every kind the same way.
    """

    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"
    WRONG_TYPE = "wrong_type"
    UNKNOWN_SUBJECT = "unknown_subject"

    def __init__(
        self,
        message: str = "Invalid or expired token",
        reason: str = MALFORMED,
        code: ErrorCode = ErrorCode.INVALID_TOKEN,
    ):
        self.reason = reason
        super().__init__(message, code)


class InvalidRefreshTokenError(InvalidTokenError):
    """Raised when a presented refresh token cannot be honoured (HTTP 403)."""

    def __init__(
        self,
        message: str = "Invalid refresh token",
        reason: str = InvalidTokenError.MALFORMED,
    ):
        super().__init__(message, reason, ErrorCode.INVALID_REFRESH_TOKEN)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, ErrorCode.WEAK_PASSWORD)


class InsufficientRoleError(AuthorizationError):
    """Raised when an authenticated user lacks a required role."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class OAuthError(DomainException):
    """Base exception for the delegated (OAuth) login flow."""

    def __init__(
        self,
        message: str = "OAuth login failed",
        code: ErrorCode = ErrorCode.OAUTH_PROVIDER_ERROR,
    ):
        super().__init__(message, code)


class OAuthProviderError(OAuthError):
    """Raised when the identity provider rejects a request or is unreachable."""


class OAuthStateMismatchError(OAuthError):
    """Raised when the callback state does not match the initiated flow."""

    def __init__(self, message: str = "OAuth state mismatch"):
        super().__init__(message)


class OAuthNotConfiguredError(OAuthError):
    """Raised when the provider's client credentials are not configured."""

    def __init__(self, message: str = "OAuth login is not available"):
        super().__init__(message, ErrorCode.OAUTH_NOT_CONFIGURED)


class OAuthAccountUnavailableError(OAuthError):
    """Raised when a provider profile cannot be mapped to a usable account."""

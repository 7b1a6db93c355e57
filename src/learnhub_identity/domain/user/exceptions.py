"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations.
"""

from learnhub.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INVALID_EMAIL)


class EmailAlreadyExistsError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email already in use",
            ErrorCode.EMAIL_ALREADY_EXISTS,
            details={"email": email},
        )


class OAuthIdentityAlreadyLinkedError(ConflictError):
    """Provider identity already belongs to another account."""

    def __init__(self, provider: str, provider_id: str) -> None:
        self.provider = provider
        self.provider_id = provider_id
        super().__init__(
            "OAuth identity already linked",
            ErrorCode.OAUTH_IDENTITY_ALREADY_LINKED,
            details={"provider": provider, "provider_id": provider_id},
        )


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "User not found",
            ErrorCode.USER_NOT_FOUND,
            details={"user_id": user_id},
        )

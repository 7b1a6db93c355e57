"""LearnHub Identity - users, credentials, tokens and delegated login.

This package handles all identity-related concerns:
- User management (identity, roles, OAuth identities)
- Authentication (registration, login, tokens, sessions)
- Password hashing and complexity rules
- Google OAuth delegated login

The HTTP surface lives in learnhub.presentation and only talks to the
application services exported here.
"""

from learnhub_identity.application.services import (
    AuthenticationService,
    OAuthLoginService,
)
from learnhub_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    OAuthIdentityAlreadyLinkedError,
    User,
    UserNotFoundError,
    UserRepository,
    UserRole,
)
from learnhub_identity.exceptions import (
    AuthError,
    InsufficientRoleError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    OAuthAccountUnavailableError,
    OAuthError,
    OAuthNotConfiguredError,
    OAuthProviderError,
    OAuthStateMismatchError,
    WeakPasswordError,
)
from learnhub_identity.schemas import (
    AuthenticatedIdentity,
    OAuthProfile,
    OAuthResolution,
    TokenPayload,
)
from learnhub_identity.services import (
    JWTService,
    PasswordHashingService,
)

__all__ = [
    # Domain - User
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "OAuthIdentityAlreadyLinkedError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
    # Exceptions
    "AuthError",
    "InsufficientRoleError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "InvalidTokenError",
    "OAuthAccountUnavailableError",
    "OAuthError",
    "OAuthNotConfiguredError",
    "OAuthProviderError",
    "OAuthStateMismatchError",
    "WeakPasswordError",
    # Schemas
    "AuthenticatedIdentity",
    "OAuthProfile",
    "OAuthResolution",
    "TokenPayload",
    # Services
    "JWTService",
    "PasswordHashingService",
    # Application Services
    "AuthenticationService",
    "OAuthLoginService",
]

"""Identity services - JWT and password hashing."""

from learnhub_identity.services.jwt_service import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    JWTService,
)
from learnhub_identity.services.password_service import (
    PASSWORD_COMPLEXITY_MESSAGE,
    PASSWORD_MAX_BYTES,
    PASSWORD_PATTERN,
    PASSWORD_TOO_LONG_MESSAGE,
    PasswordHashingService,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "PASSWORD_COMPLEXITY_MESSAGE",
    "PASSWORD_MAX_BYTES",
    "PASSWORD_PATTERN",
    "PASSWORD_TOO_LONG_MESSAGE",
    "REFRESH_TOKEN_TYPE",
    "JWTService",
    "PasswordHashingService",
]

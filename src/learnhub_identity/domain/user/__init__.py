"""User domain manages user identity.

This domain handles:
- User aggregate (identity: id, name, email, role, OAuth identity)
- Credential store interface
"""

from learnhub_identity.domain.user.aggregates import User
from learnhub_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    OAuthIdentityAlreadyLinkedError,
    UserNotFoundError,
)
from learnhub_identity.domain.user.repositories import UserRepository
from learnhub_identity.domain.user.value_objects import (
    Email,
    UserRole,
)

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "OAuthIdentityAlreadyLinkedError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UserRole",
]

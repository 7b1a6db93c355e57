"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from learnhub_identity.domain.user import User, UserRole


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    email
        The user's email address
    role
        The user's role at issue time
    exp
        Token expiration timestamp
    token_type
        Either "access" or "refresh"
    """

    user_id: UUID
    email: str
    role: str
    exp: datetime
    token_type: str  # "access" or "refresh"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Immutable identity of the caller, handed to request handlers.

    ``method`` records which check established it: "bearer" (Authorization
    header), "cookie" (access token cookie) or "session".
    """

    user_id: UUID
    email: str
    role: UserRole
    method: str

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles


@dataclass(frozen=True)
class OAuthProfile:
    """Profile returned by an external identity provider."""

    provider: str
    provider_id: str
    email: str
    name: str
    avatar: str | None = None
    email_verified: bool = False


@dataclass(frozen=True)
class OAuthResolution:
    """Local user resolved from a provider profile.

    ``created`` is set when the profile produced a new account, ``linked``
    when it was attached to an existing password account.
    """

    user: User
    created: bool = False
    linked: bool = False

"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from learnhub_identity.domain.user.aggregates.user import User
from learnhub_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates and their password hashes.

    Absence is reported as ``None``, never as an exception. Writes must not
    overwrite an existing record; uniqueness violations surface as
    ``ConflictError`` subclasses.
    """

    @abstractmethod
    async def create(self, user: User, password_hash: str | None = None) -> None:
        """Insert a new user, optionally with a password hash."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address (case-insensitive)."""

    @abstractmethod
    async def find_by_oauth_id(
        self,
        provider: str,
        provider_id: str,
    ) -> Optional[User]:
        """Find a user by the identity an OAuth provider assigned to them."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def get_password_hash(self, user_id: UUID) -> Optional[str]:
        """Return the stored password hash, or None for OAuth-only accounts."""

    @abstractmethod
    async def update_password(self, user_id: UUID, password_hash: str) -> None:
        """Overwrite the password hash; raises UserNotFoundError if absent."""

    @abstractmethod
    async def update_last_login(self, user_id: UUID) -> None:
        """Set last_login to now."""

    @abstractmethod
    async def link_oauth_identity(
        self,
        user_id: UUID,
        provider: str,
        provider_id: str,
        avatar: str | None = None,
    ) -> None:
        """Attach a provider identity to an existing user."""

    @abstractmethod
    async def count(self) -> int:
        """Count total users."""

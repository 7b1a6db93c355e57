"""User aggregate for identity concerns only."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from learnhub.domain.shared.time import utc_now
from learnhub_identity.domain.user.value_objects import UserRole
from learnhub_identity.domain.user.value_objects.email import Email


class User:
    """
    User aggregate root.

    Carries identity, role and the optional OAuth identity. The password
    hash is deliberately absent: it lives in the credential store only and
    is read back solely for verification.
    """

    def __init__(
        self,
        name: str,
        email: Union[str, Email],
        role: Union[str, UserRole] = UserRole.STUDENT,
        id: UUID | None = None,
        oauth_provider: str | None = None,
        oauth_provider_id: str | None = None,
        avatar: str | None = None,
        is_active: bool = True,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        last_login: datetime | None = None,
    ):
        self._name = name.strip()
        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._role = role if isinstance(role, UserRole) else UserRole(role)
        self._oauth_provider = oauth_provider
        self._oauth_provider_id = oauth_provider_id
        self._avatar = avatar
        self._is_active = is_active
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()
        self._last_login = last_login

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == UserRole.ADMIN

    @property
    def oauth_provider(self) -> str | None:
        return self._oauth_provider

    @property
    def oauth_provider_id(self) -> str | None:
        return self._oauth_provider_id

    @property
    def has_oauth_identity(self) -> bool:
        return self._oauth_provider_id is not None

    @property
    def avatar(self) -> str | None:
        return self._avatar

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def last_login(self) -> datetime | None:
        return self._last_login

    def link_oauth_identity(
        self,
        provider: str,
        provider_id: str,
        avatar: str | None = None,
    ) -> None:
        """Attach a provider identity, turning this into a hybrid account.

        An existing avatar is kept; the provider's one only fills a gap.
        """
        self._oauth_provider = provider
        self._oauth_provider_id = provider_id
        if avatar and not self._avatar:
            self._avatar = avatar
        self._updated_at = utc_now()

    def record_login(self, at: datetime | None = None) -> None:
        self._last_login = at or utc_now()

    def deactivate(self) -> None:
        self._is_active = False
        self._updated_at = utc_now()

    @classmethod
    def create(
        cls,
        name: str,
        email: Union[str, Email],
        role: UserRole = UserRole.STUDENT,
    ) -> "User":
        return cls(name=name, email=email, role=role)

    @classmethod
    def create_from_oauth(
        cls,
        name: str,
        email: Union[str, Email],
        provider: str,
        provider_id: str,
        avatar: str | None = None,
    ) -> "User":
        """New OAuth-only account; always a student."""
        return cls(
            name=name,
            email=email,
            role=UserRole.STUDENT,
            oauth_provider=provider,
            oauth_provider_id=provider_id,
            avatar=avatar,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        name: str,
        email: Union[str, Email],
        role: Union[str, UserRole],
        oauth_provider: str | None,
        oauth_provider_id: str | None,
        avatar: str | None,
        is_active: bool,
        created_at: datetime,
        updated_at: datetime,
        last_login: datetime | None,
    ) -> "User":
        return cls(
            id=id,
            name=name,
            email=email,
            role=role,
            oauth_provider=oauth_provider,
            oauth_provider_id=oauth_provider_id,
            avatar=avatar,
            is_active=is_active,
            created_at=created_at,
            updated_at=updated_at,
            last_login=last_login,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"

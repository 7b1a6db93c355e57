"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domain.shared.time import as_utc, utc_now
from learnhub_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    OAuthIdentityAlreadyLinkedError,
    User,
    UserNotFoundError,
    UserRepository,
)
from learnhub_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    Writes are flushed immediately; committing is left to the owner of
    the session (one session per request).
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: User, password_hash: str | None = None) -> None:
        model = self._map_to_model(user, password_hash)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise self._translate_integrity_error(e, user) from e
        logger.info("Created user: %s (email: %s)", user.id, user.email)

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value

        stmt = select(UserModel).where(UserModel.email == email_value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_oauth_id(self, provider: str, provider_id: str) -> User | None:
        stmt = select(UserModel).where(
            UserModel.oauth_provider == provider,
            UserModel.oauth_provider_id == provider_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def get_password_hash(self, user_id: UUID) -> str | None:
        stmt = select(UserModel.password_hash).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_password(self, user_id: UUID, password_hash: str) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=utc_now())
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise UserNotFoundError(str(user_id))
        await self._session.flush()
        logger.info("Password updated for user: %s", user_id)

    async def update_last_login(self, user_id: UUID) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(last_login=utc_now())
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def link_oauth_identity(
        self,
        user_id: UUID,
        provider: str,
        provider_id: str,
        avatar: str | None = None,
    ) -> None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            raise UserNotFoundError(str(user_id))

        model.oauth_provider = provider
        model.oauth_provider_id = provider_id
        if avatar and not model.avatar:
            model.avatar = avatar

        try:
            await self._session.flush()
        except IntegrityError as e:
            raise OAuthIdentityAlreadyLinkedError(provider, provider_id) from e
        logger.info("Linked %s identity to user: %s", provider, user_id)

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _translate_integrity_error(
        error: IntegrityError,
        user: User,
    ) -> EmailAlreadyExistsError | OAuthIdentityAlreadyLinkedError:
        message = str(error.orig).lower()
        if "oauth" in message and user.oauth_provider_id is not None:
            return OAuthIdentityAlreadyLinkedError(
                user.oauth_provider or "",
                user.oauth_provider_id,
            )
        return EmailAlreadyExistsError(user.email)

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            oauth_provider=model.oauth_provider,
            oauth_provider_id=model.oauth_provider_id,
            avatar=model.avatar,
            is_active=model.is_active,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            last_login=(
                as_utc(model.last_login) if model.last_login else None
            ),
        )

    def _map_to_model(self, user: User, password_hash: str | None) -> UserModel:
        return UserModel(
            id=user.id,
            name=user.name,
            email=user.email,
            password_hash=password_hash,
            role=user.role.value,
            oauth_provider=user.oauth_provider,
            oauth_provider_id=user.oauth_provider_id,
            avatar=user.avatar,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )

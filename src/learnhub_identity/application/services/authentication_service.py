"""Authentication service for user registration and login."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping
from uuid import UUID

from learnhub_identity.domain.user import (
    EmailAlreadyExistsError,
    User,
    UserNotFoundError,
    UserRole,
)
from learnhub_identity.exceptions import (
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
)
from learnhub_identity.schemas import AuthenticatedIdentity
from learnhub_identity.services import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    JWTService,
    PasswordHashingService,
)

if TYPE_CHECKING:
    from learnhub_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)

# Keys written into the signed server-side session
SESSION_USER_ID = "user_id"
SESSION_EMAIL = "email"
SESSION_ROLE = "role"


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates the credential store, password hashing and JWT tokens:
    - User registration
    - Login with password
    - Token refresh and access token authentication
    - Password change

    Every login failure surfaces as the same ``InvalidCredentialsError`` so
    callers cannot tell unknown emails from wrong passwords.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service

    def _create_token_pair(self, user: User) -> tuple[str, str]:
        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
        )
        refresh_token = self._jwt_service.create_refresh_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
        )
        return access_token, refresh_token

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.STUDENT,
    ) -> tuple[User, str, str]:
        # Fast path only; the unique index settles concurrent registrations.
        if await self._user_repo.exists_by_email(email):
            raise EmailAlreadyExistsError(email)

        user = User.create(name, email, role=role)
        password_hash = await self._password_service.hash_async(password)
        await self._user_repo.create(user, password_hash=password_hash)

        access_token, refresh_token = self._create_token_pair(user)

        logger.info("User registered: %s (role: %s)", user.email, role.value)
        return user, access_token, refresh_token

    async def login(
        self,
        email: str,
        password: str,
    ) -> tuple[User, str, str]:
        user = await self._user_repo.find_by_email(email)
        if user is None:
            logger.warning("Failed login for %s: unknown email", email)
            raise InvalidCredentialsError

        if not user.is_active:
            logger.warning("Failed login for %s: account inactive", user.email)
            raise InvalidCredentialsError

        password_hash = await self._user_repo.get_password_hash(user.id)
        if password_hash is None:
            logger.warning("Failed login for %s: no password set", user.email)
            raise InvalidCredentialsError

        if not await self._password_service.verify_async(password, password_hash):
            logger.warning("Failed login for %s: wrong password", user.email)
            raise InvalidCredentialsError

        access_token, refresh_token = await self.complete_login(user)

        logger.info("User logged in: %s", user.email)
        return user, access_token, refresh_token

    async def complete_login(self, user: User) -> tuple[str, str]:
        """Record the login and issue a token pair for an already verified user."""
        await self._record_login(user)
        return self._create_token_pair(user)

    async def _record_login(self, user: User) -> None:
        try:
            await self._user_repo.update_last_login(user.id)
        except Exception:
            logger.warning(
                "Could not update last login for user %s",
                user.id,
                exc_info=True,
            )
            return
        user.record_login()

    async def refresh_access_token(self, refresh_token: str) -> str:
        """Issue a new access token from a refresh token.

        Raises
        ------
        InvalidRefreshTokenError
            If the token is invalid, expired, not a refresh token, or its
            user no longer exists or is inactive
        """
        try:
            payload = self._jwt_service.verify_token(
                refresh_token,
                expected_type=REFRESH_TOKEN_TYPE,
            )
        except InvalidTokenError as e:
            logger.info("Refresh token rejected (%s)", e.reason)
            raise InvalidRefreshTokenError(reason=e.reason) from e

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None or not user.is_active:
            logger.info("Refresh token rejected for user %s", payload.user_id)
            raise InvalidRefreshTokenError(reason=InvalidTokenError.UNKNOWN_SUBJECT)

        logger.debug("Access token refreshed for user: %s", user.email)
        return self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
        )

    def authenticate_token(self, token: str) -> AuthenticatedIdentity:
        """Turn a bearer access token into the caller's identity.

        Stateless: the store is not consulted.
        """
        payload = self._jwt_service.verify_token(
            token,
            expected_type=ACCESS_TOKEN_TYPE,
        )
        try:
            role = UserRole(payload.role)
        except ValueError as e:
            msg = f"Unknown role claim: {payload.role}"
            raise InvalidTokenError(msg, reason=InvalidTokenError.MALFORMED) from e
        return AuthenticatedIdentity(
            user_id=payload.user_id,
            email=payload.email,
            role=role,
            method="bearer",
        )

    @staticmethod
    def session_data(user: User) -> dict[str, str]:
        """Values stored in the signed session after a successful login."""
        return {
            SESSION_USER_ID: str(user.id),
            SESSION_EMAIL: user.email,
            SESSION_ROLE: user.role.value,
        }

    @staticmethod
    def identity_from_session(
        session: Mapping[str, Any],
    ) -> AuthenticatedIdentity | None:
        """Identity carried by a signed session, or None if there is none."""
        user_id = session.get(SESSION_USER_ID)
        email = session.get(SESSION_EMAIL)
        role = session.get(SESSION_ROLE)
        if not user_id or not email or not role:
            return None
        try:
            return AuthenticatedIdentity(
                user_id=UUID(str(user_id)),
                email=str(email),
                role=UserRole(role),
                method="session",
            )
        except ValueError:
            logger.info("Ignoring session with malformed identity")
            return None

    async def get_user(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        user = await self.get_user(user_id)

        password_hash = await self._user_repo.get_password_hash(user.id)
        if not await self._password_service.verify_async(
            current_password,
            password_hash,
        ):
            logger.warning("Wrong current password for user: %s", user_id)
            msg = "Current password is incorrect"
            raise InvalidCredentialsError(msg)

        new_hash = await self._password_service.hash_async(new_password)
        await self._user_repo.update_password(user.id, new_hash)

        logger.info("Password changed for user: %s", user_id)

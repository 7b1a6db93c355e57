"""FastAPI dependency injection for the LearnHub API.

Provides dependencies for:
- Database sessions
- Identity services (password hashing, JWT, OAuth)
- Authentication (caller identity from bearer token, cookie or session)
- Role checks
"""

import logging
from functools import lru_cache
from typing import Annotated, AsyncGenerator, Callable

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from learnhub.domain.shared.exceptions import AuthenticationError
from learnhub.presentation.api.config import get_api_settings
from learnhub_config.settings import Settings, get_settings
from learnhub_identity import (
    AuthenticatedIdentity,
    AuthenticationService,
    InsufficientRoleError,
    InvalidTokenError,
    JWTService,
    OAuthLoginService,
    PasswordHashingService,
    UserRepository,
    UserRole,
)
from learnhub_identity.infrastructure.oauth import GoogleOAuthClient
from learnhub_identity.infrastructure.persistence.sqlalchemy import (
    IdentityBase,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)

# Cookie names, shared by every login flow
ACCESS_TOKEN_COOKIE = "accessToken"  # NOQA: S105
REFRESH_TOKEN_COOKIE = "refreshToken"  # NOQA: S105
SESSION_COOKIE = "sessionId"


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_settings().database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    One session per request. Handlers commit explicitly; any exception
    escaping the handler rolls the session back.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Database Schema Management
# -----------------------------------------------------------------------------


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    """
    engine = engine or get_engine()
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


# -----------------------------------------------------------------------------
# Identity Services
# -----------------------------------------------------------------------------


SettingsDep = Annotated[Settings, Depends(get_api_settings)]


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_hours=settings.jwt_access_token_expire_hours,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service with the configured bcrypt cost."""
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepositorySQLAlchemy(session)


async def get_authentication_service(
    user_repo: UserRepository = Depends(get_user_repository),
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates user registration, login, and token management.
    """
    return AuthenticationService(
        user_repository=user_repo,
        password_service=password_service,
        jwt_service=jwt_service,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


def get_google_client(settings: SettingsDep) -> GoogleOAuthClient:
    """Google OAuth client built from settings for this request."""
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret.get_secret_value(),
        redirect_uri=settings.google_callback_url,
    )


GoogleClient = Annotated[GoogleOAuthClient, Depends(get_google_client)]


async def get_oauth_login_service(
    auth_service: AuthService,
    user_repo: UserRepository = Depends(get_user_repository),
) -> OAuthLoginService:
    return OAuthLoginService(user_repository=user_repo, auth_service=auth_service)


OAuthService = Annotated[OAuthLoginService, Depends(get_oauth_login_service)]


# -----------------------------------------------------------------------------
# Current Identity (bearer token, access token cookie or session)
# -----------------------------------------------------------------------------


def _identity_from_token(
    auth_service: AuthenticationService,
    token: str | None,
    method: str,
) -> AuthenticatedIdentity | None:
    if not token:
        return None
    try:
        identity = auth_service.authenticate_token(token)
    except InvalidTokenError as e:
        logger.info("Rejected %s token (%s): %s", method, e.reason, e.message)
        return None
    if method != identity.method:
        identity = AuthenticatedIdentity(
            user_id=identity.user_id,
            email=identity.email,
            role=identity.role,
            method=method,
        )
    return identity


async def get_current_identity(
    request: Request,
    auth_service: AuthService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    access_token_cookie: Annotated[
        str | None,
        Cookie(alias=ACCESS_TOKEN_COOKIE),
    ] = None,
) -> AuthenticatedIdentity:
    """
    FastAPI dependency resolving who is calling.

    Two independent checks, either of which is sufficient:
    - a valid access JWT in the Authorization header or the access cookie
    - a signed server-side session holding a user id

    Raises
    ------
    AuthenticationError
        401 if neither check succeeds
    """
    identity = _identity_from_token(
        auth_service,
        credentials.credentials if credentials else None,
        "bearer",
    )
    if identity is None:
        identity = _identity_from_token(auth_service, access_token_cookie, "cookie")
    if identity is None:
        identity = auth_service.identity_from_session(request.session)
    if identity is None:
        raise AuthenticationError
    return identity


# Type alias for injected caller identity
CurrentIdentity = Annotated[AuthenticatedIdentity, Depends(get_current_identity)]


def require_role(
    *roles: UserRole,
) -> Callable[[AuthenticatedIdentity], AuthenticatedIdentity]:
    """Dependency factory admitting only identities holding one of ``roles``.

    Examples
    --------
    >>> @router.get("/admin", dependencies=[Depends(require_role(UserRole.ADMIN))])
    """

    def _check_role(identity: CurrentIdentity) -> AuthenticatedIdentity:
        if not identity.has_role(*roles):
            logger.warning(
                "User %s (role %s) denied; requires %s",
                identity.user_id,
                identity.role.value,
                ", ".join(role.value for role in roles),
            )
            raise InsufficientRoleError
        return identity

    return _check_role

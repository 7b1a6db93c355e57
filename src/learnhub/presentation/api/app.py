"""FastAPI application factory for the LearnHub identity service.

``create_app`` wires the signed session middleware, CORS, the error
handlers and the ``/auth`` router. There is no module-level app; run it with
``uvicorn --factory learnhub.presentation.api.app:create_app`` or
``learnhub serve``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from learnhub.presentation.api.config import CookiePolicy, get_api_settings
from learnhub.presentation.api.dependencies import (
    SESSION_COOKIE,
    create_tables,
    get_engine,
)
from learnhub.presentation.api.exception_handlers import setup_exception_handlers
from learnhub.presentation.api.routers import auth_router
from learnhub_config.settings import Settings, get_settings

API_VERSION = "1.0.0"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that follow LOG_LEVEL; everything else third-party stays at WARNING
_APP_LOGGERS = ("learnhub", "learnhub_identity", "learnhub_config")
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "asyncpg")

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _configure_logging(log_level_name: str = "INFO") -> None:
    """Send log records to stdout; runs once per process."""
    level = logging.getLevelName(log_level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in _APP_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Accounts, logins and tokens.

**A request is authenticated by either:**
- an access JWT (`Authorization: Bearer ...` or the `accessToken` cookie)
- the signed server-side session (`sessionId` cookie)

**Notes:**
- Passwords are stored as bcrypt hashes only
- The refresh token is sent as the HttpOnly `refreshToken` cookie
- A failed login never says whether the email exists
- Google login is available when `GOOGLE_CLIENT_ID`/`GOOGLE_CLIENT_SECRET` are set
""",
    },
    {
        "name": "Health",
        "description": "Liveness probe.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("LearnHub identity API %s starting", API_VERSION)
    engine = get_engine()
    try:
        await create_tables(engine)
    except OSError:
        logger.critical("Database is unreachable; refusing to start")
        raise SystemExit(1) from None

    yield

    await engine.dispose()
    logger.info("LearnHub identity API stopped; connection pool closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Parameters
    ----------
    settings
        Settings to use instead of the environment. They are also what
        every request-scoped dependency sees (JWT secret, cookie policy,
        bcrypt cost, Google credentials). The database engine is a process
        singleton built from the environment; override ``get_db_session``
        to point requests at another database.

    Returns
    -------
    The configured ``FastAPI`` instance.
    """
    explicit_settings = settings is not None
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    docs_enabled = settings.api_debug
    app = FastAPI(
        title=f"{settings.app_name} Identity API",
        description="Registration, password and Google login, JWT and sessions.",
        version=API_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    if explicit_settings:
        app.dependency_overrides[get_api_settings] = lambda: settings

    cookies = CookiePolicy.from_settings(settings)
    # Session contents are signed with itsdangerous, not encrypted
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key.get_secret_value(),
        session_cookie=SESSION_COOKIE,
        max_age=cookies.session_max_age,
        same_site=cookies.samesite,
        https_only=cookies.secure,
        domain=cookies.domain,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(
        app,
        collect_all_validation_errors=settings.validation_collect_all_errors,
    )
    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {"status": "healthy", "version": API_VERSION}

    return app

"""Pytest fixtures for API integration tests.

The app runs against a throwaway SQLite file so the TestClient's own event
loop can open connections freely.
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from learnhub.presentation.api.app import create_app
from learnhub.presentation.api.dependencies import get_db_session, get_google_client
from learnhub_config.settings import Settings
from learnhub_identity.infrastructure.oauth import GoogleOAuthClient
from learnhub_identity.infrastructure.persistence.sqlalchemy import IdentityBase

CLIENT_URL = "http://client.test"
TEST_PASSWORD = "Str0ng!Pwd"


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings; plain HTTP cookies and a cheap bcrypt cost."""
    return Settings(
        _env_file=None,
        # Required security settings
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        session_secret_key=SecretStr("test-session-secret-for-testing-only"),
        postgres_password=SecretStr("test-password"),
        # API settings
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        bcrypt_rounds=4,
        client_url=CLIENT_URL,
    )


@pytest.fixture
def async_engine(tmp_path):
    """Engine on a per-test SQLite file; tables are created up front."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        echo=False,
        poolclass=NullPool,
    )

    async def _create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(IdentityBase.metadata.create_all)

    # Run in a fresh event loop to avoid conflicts with TestClient's loop
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(_create_tables())
    finally:
        loop.close()

    return engine


@pytest.fixture
def app(api_settings, async_engine):
    app = create_app(settings=api_settings)

    test_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override the database session dependency
    async def override_get_db_session():
        async with test_session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def registered_user_data() -> dict:
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": TEST_PASSWORD,
        "confirm_password": TEST_PASSWORD,
    }


@pytest.fixture
def registered_user(test_client, registered_user_data) -> dict:
    """Register a user and return the response body.

    Clears the cookies the registration set, so tests start anonymous.
    """
    response = test_client.post("/auth/register", json=registered_user_data)
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )
    test_client.cookies.clear()
    return response.json()


@pytest.fixture
def auth_headers(registered_user) -> dict:
    return {"Authorization": f"Bearer {registered_user['token']}"}


# -----------------------------------------------------------------------------
# Google
# -----------------------------------------------------------------------------


GOOGLE_PROFILE = {
    "id": "google-42",
    "email": "grace@example.com",
    "verified_email": True,
    "name": "Grace Hopper",
    "picture": "https://example.com/grace.png",
}


@pytest.fixture
def google_profile() -> dict:
    """Profile the fake Google serves; tests may mutate it before calling."""
    return dict(GOOGLE_PROFILE)


@pytest.fixture
def google_client(google_profile) -> GoogleOAuthClient:
    """A configured Google client whose HTTP calls never leave the process."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            if b"code=good-code" not in request.content:
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "provider-token"})
        return httpx.Response(200, json=google_profile)

    return GoogleOAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://testserver/auth/google/callback",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def oauth_client(app, google_client) -> TestClient:
    """TestClient with Google wired to the in-process fake; no auto-redirects."""
    app.dependency_overrides[get_google_client] = lambda: google_client
    return TestClient(app, follow_redirects=False)

"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/              # Fast, isolated tests (mocks, no database)
    └── integration/       # In-memory SQLite persistence and HTTP API tests

Required secrets get throwaway defaults so settings can be built without a
config/.env file. Real environment variables still take precedence.
"""

import os

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-testing-only")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret-for-testing-only")
os.environ.setdefault("POSTGRES_PASSWORD", "test-password")

from learnhub.presentation.api.config import get_api_settings  # NOQA: E402
from learnhub_config import clear_settings_cache  # NOQA: E402


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that use a database or the full HTTP stack",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache_fixture():
    """Every test starts from freshly loaded settings."""
    clear_settings_cache()
    get_api_settings.cache_clear()
    yield
    clear_settings_cache()
    get_api_settings.cache_clear()

"""Environment-driven configuration for LearnHub.

Values come from, highest priority first:

1. process environment variables
2. the file named by ``LEARNHUB_ENV_FILE``
3. ``config/.env.dev`` (local development)
4. ``config/.env`` (containers)
5. the defaults below

Field names map to upper-case variables, e.g. ``jwt_secret_key`` is read
from ``JWT_SECRET_KEY``.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VARIABLE = "LEARNHUB_ENV_FILE"
_ENV_FILE_CANDIDATES = (".env.dev", ".env")


def _project_root() -> Path:
    here = Path(__file__).resolve()
    for directory in here.parents:
        if (directory / "config").is_dir() or (directory / ".git").exists():
            return directory
    # src/learnhub_config/settings.py -> repository root
    return here.parents[2]


def get_config_dir() -> Path:
    return _project_root() / "config"


def _env_file() -> Path | None:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = _project_root() / path
        if path.is_file():
            return path

    config_dir = get_config_dir()
    for name in _ENV_FILE_CANDIDATES:
        candidate = config_dir / name
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    """All runtime configuration of the identity service.

    The three secrets have no default; the process refuses to start
    without them.
    """

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- secrets --------------------------------------------------------
    jwt_secret_key: SecretStr
    session_secret_key: SecretStr
    postgres_password: SecretStr

    app_name: str = "LearnHub"
    log_level: str = "INFO"

    # --- database -------------------------------------------------------
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_db: str = "learnhub"

    # --- HTTP -----------------------------------------------------------
    api_host: str = "0.0.0.0"  # NOQA: S104
    api_port: int = 8000
    api_debug: bool = False
    # Comma separated; empty disables cross-origin requests
    api_cors_origins: str = ""
    api_cookie_secure: bool = True
    api_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    api_cookie_domain: str | None = None
    # Report every failed validation rule instead of the first
    validation_collect_all_errors: bool = False

    # --- tokens and hashing ---------------------------------------------
    jwt_access_token_expire_hours: int = Field(default=24, gt=0)
    jwt_refresh_token_expire_days: int = Field(default=30, gt=0)
    # bcrypt accepts 4..31
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # --- Google login ---------------------------------------------------
    google_client_id: str = ""
    google_client_secret: SecretStr = SecretStr("")
    google_callback_url: str = "http://localhost:8000/auth/google/callback"
    # Browser destination after the OAuth callback
    client_url: str = "http://localhost:5173"

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _join_cors_origins(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ",".join(str(origin) for origin in value)
        return str(value or "")

    @field_validator("client_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        password = self.postgres_password.get_secret_value()
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.api_cors_origins.split(",")
            if origin.strip()
        ]

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(
            self.google_client_id and self.google_client_secret.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once per process.

    Raises a pydantic ``ValidationError`` naming the missing variables when
    a required secret is not configured.
    """
    return Settings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    get_settings.cache_clear()

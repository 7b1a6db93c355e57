"""API-side view of the settings.

``get_api_settings`` is the one dependency every handler uses to reach
configuration, which lets tests swap settings through
``app.dependency_overrides``. ``CookiePolicy`` collects the cookie
attributes shared by the token cookies and the session cookie.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from learnhub_config.settings import Settings, get_settings


@lru_cache
def get_api_settings() -> Settings:
    return get_settings()


@dataclass(frozen=True)
class CookiePolicy:
    """Attributes for every authentication cookie LearnHub sets."""

    secure: bool
    samesite: str
    domain: str | None
    access_max_age: int
    refresh_max_age: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "CookiePolicy":
        access = timedelta(hours=settings.jwt_access_token_expire_hours)
        refresh = timedelta(days=settings.jwt_refresh_token_expire_days)
        return cls(
            secure=settings.api_cookie_secure,
            samesite=settings.api_cookie_samesite,
            domain=settings.api_cookie_domain,
            access_max_age=int(access.total_seconds()),
            refresh_max_age=int(refresh.total_seconds()),
        )

    @property
    def session_max_age(self) -> int:
        # The session lives as long as the refresh token it stands beside
        return self.refresh_max_age

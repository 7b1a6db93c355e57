"""OAuth provider clients."""

from learnhub_identity.infrastructure.oauth.google_client import (
    GOOGLE_PROVIDER,
    GoogleOAuthClient,
)

__all__ = [
    "GOOGLE_PROVIDER",
    "GoogleOAuthClient",
]

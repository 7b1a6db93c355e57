"""Application services for identity management."""

from learnhub_identity.application.services.authentication_service import (
    AuthenticationService,
)
from learnhub_identity.application.services.oauth_login_service import (
    OAuthLoginService,
)

__all__ = ["AuthenticationService", "OAuthLoginService"]

"""Resolution of OAuth provider profiles to local users."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from learnhub_identity.domain.user import (
    InvalidEmailError,
    OAuthIdentityAlreadyLinkedError,
    User,
)
from learnhub_identity.exceptions import OAuthAccountUnavailableError
from learnhub_identity.schemas import OAuthProfile, OAuthResolution

if TYPE_CHECKING:
    from learnhub_identity.application.services.authentication_service import (
        AuthenticationService,
    )
    from learnhub_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)

# Column width of users.name
_MAX_NAME_LENGTH = 100


class OAuthLoginService:
    """
    Second half of the delegated login: provider profile -> local user.

    The provider is trusted as the source of truth for email ownership;
    an existing password account is only linked when the provider reports
    the email as verified.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        auth_service: AuthenticationService,
    ):
        self._user_repo = user_repository
        self._auth_service = auth_service

    async def resolve(self, profile: OAuthProfile) -> OAuthResolution:
        """Find, create or link the local user for a provider profile.

        Raises
        ------
        OAuthAccountUnavailableError
            If the profile cannot be mapped to an active account
        OAuthIdentityAlreadyLinkedError
            If the provider identity was claimed concurrently
        """
        user = await self._user_repo.find_by_oauth_id(
            profile.provider,
            profile.provider_id,
        )
        if user is not None:
            self._ensure_active(user)
            return OAuthResolution(user=user)

        try:
            existing = await self._user_repo.find_by_email(profile.email)
        except InvalidEmailError as e:
            msg = "Provider returned an unusable email address"
            raise OAuthAccountUnavailableError(msg) from e

        if existing is None:
            return await self._create_user(profile)

        return await self._link_user(existing, profile)

    async def login(self, profile: OAuthProfile) -> tuple[OAuthResolution, str, str]:
        """Resolve the profile and issue tokens for the resulting user."""
        resolution = await self.resolve(profile)
        access_token, refresh_token = await self._auth_service.complete_login(
            resolution.user,
        )
        logger.info(
            "OAuth login via %s: %s (created=%s, linked=%s)",
            profile.provider,
            resolution.user.email,
            resolution.created,
            resolution.linked,
        )
        return resolution, access_token, refresh_token

    async def _create_user(self, profile: OAuthProfile) -> OAuthResolution:
        user = User.create_from_oauth(
            name=(profile.name.strip() or profile.email)[:_MAX_NAME_LENGTH],
            email=profile.email,
            provider=profile.provider,
            provider_id=profile.provider_id,
            avatar=profile.avatar,
        )
        await self._user_repo.create(user)
        return OAuthResolution(user=user, created=True)

    async def _link_user(self, user: User, profile: OAuthProfile) -> OAuthResolution:
        self._ensure_active(user)

        if not profile.email_verified:
            msg = "Email already registered and not verified by the provider"
            raise OAuthAccountUnavailableError(msg)

        if user.has_oauth_identity:
            raise OAuthIdentityAlreadyLinkedError(
                profile.provider,
                profile.provider_id,
            )

        await self._user_repo.link_oauth_identity(
            user.id,
            profile.provider,
            profile.provider_id,
            profile.avatar,
        )
        user.link_oauth_identity(profile.provider, profile.provider_id, profile.avatar)
        return OAuthResolution(user=user, linked=True)

    @staticmethod
    def _ensure_active(user: User) -> None:
        if not user.is_active:
            msg = "Account is inactive"
            raise OAuthAccountUnavailableError(msg)

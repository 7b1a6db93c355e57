"""Google OAuth2 client for delegated login.

Built explicitly from configuration and injected where needed; there is no
process-wide provider registry.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from learnhub_identity.exceptions import OAuthNotConfiguredError, OAuthProviderError
from learnhub_identity.schemas import OAuthProfile

logger = logging.getLogger(__name__)

# Google OAuth2 endpoints
_GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
_GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
_GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

GOOGLE_PROVIDER = "google"


class GoogleOAuthClient:
    """Authorization-code flow against Google, limited to profile and email.

    Parameters
    ----------
    client_id, client_secret
        OAuth client credentials issued by Google
    redirect_uri
        Callback URL registered with Google
    http_client
        Optional shared ``httpx.AsyncClient``; a short-lived client is
        opened per call when omitted
    timeout
        Per-request timeout in seconds for the short-lived clients
    """

    SCOPES = ("openid", "email", "profile")

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._http_client = http_client
        self._timeout = timeout

    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def authorization_url(self, state: str) -> str:
        """URL the user agent is redirected to for consent."""
        if not self.is_configured():
            raise OAuthNotConfiguredError
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "state": state,
            "prompt": "select_account",
        }
        return f"{_GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """Exchange the authorization code for a provider access token."""
        data = await self._request(
            "POST",
            _GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        access_token = data.get("access_token")
        if not access_token:
            msg = "Token response did not contain an access token"
            raise OAuthProviderError(msg)
        return access_token

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        """Fetch the signed-in user's profile."""
        data = await self._request(
            "GET",
            _GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        provider_id = data.get("id") or data.get("sub")
        email = data.get("email")
        if not provider_id or not email:
            msg = "Profile response is missing id or email"
            raise OAuthProviderError(msg)

        return OAuthProfile(
            provider=GOOGLE_PROVIDER,
            provider_id=str(provider_id),
            email=email,
            name=data.get("name") or email.split("@")[0],
            avatar=data.get("picture"),
            email_verified=bool(
                data.get("verified_email", data.get("email_verified", False))
            ),
        )

    async def fetch_profile_for_code(self, code: str) -> OAuthProfile:
        """Callback helper: code exchange followed by the profile lookup."""
        access_token = await self.exchange_code(code)
        return await self.fetch_profile(access_token)

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            if self._http_client is not None:
                response = await self._http_client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google responded %s for %s", e.response.status_code, url
            )
            msg = f"Google request failed with status {e.response.status_code}"
            raise OAuthProviderError(msg) from e
        except httpx.HTTPError as e:
            logger.warning("Google request to %s failed: %s", url, e)
            msg = "Google request failed"
            raise OAuthProviderError(msg) from e
        except ValueError as e:
            msg = "Google returned an unreadable response"
            raise OAuthProviderError(msg) from e

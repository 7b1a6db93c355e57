"""Authentication router for registration, login, OAuth and token management."""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from learnhub.domain.shared.exceptions import AuthenticationError, DomainException
from learnhub.presentation.api.config import CookiePolicy
from learnhub.presentation.api.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    SESSION_COOKIE,
    AuthService,
    CurrentIdentity,
    DBSession,
    GoogleClient,
    OAuthService,
    SettingsDep,
    require_role,
)
from learnhub.presentation.api.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUserResponse,
    IdentityResponse,
    LoginRequest,
    MessageResponse,
    ProtectedResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserProfileResponse,
    UserSummary,
)
from learnhub_config.settings import Settings
from learnhub_identity import (
    AuthenticatedIdentity,
    AuthenticationService,
    OAuthNotConfiguredError,
    OAuthProviderError,
    OAuthStateMismatchError,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Session key holding the state parameter of a pending OAuth login
OAUTH_STATE_SESSION_KEY = "oauth_state"


def _set_cookie(
    response: Response,
    policy: CookiePolicy,
    key: str,
    value: str,
    max_age: int,
) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path="/",
        domain=policy.domain,
        secure=policy.secure,
        httponly=True,
        samesite=policy.samesite,
    )


def _set_token_cookies(
    response: Response,
    settings: Settings,
    access_token: str | None = None,
    refresh_token: str | None = None,
) -> None:
    """Store tokens in HttpOnly cookies so browser clients never handle them."""
    policy = CookiePolicy.from_settings(settings)
    if access_token is not None:
        _set_cookie(
            response,
            policy,
            ACCESS_TOKEN_COOKIE,
            access_token,
            policy.access_max_age,
        )
    if refresh_token is not None:
        _set_cookie(
            response,
            policy,
            REFRESH_TOKEN_COOKIE,
            refresh_token,
            policy.refresh_max_age,
        )


def _clear_auth_cookies(response: Response, settings: Settings) -> None:
    domain = settings.api_cookie_domain
    for key in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, SESSION_COOKIE):
        response.delete_cookie(key=key, path="/", domain=domain)


def _establish_login(
    request: Request,
    response: Response,
    user: User,
    access_token: str,
    refresh_token: str,
    settings: Settings,
) -> None:
    """Attach both authentication modes: token cookies and the session."""
    _set_token_cookies(response, settings, access_token, refresh_token)
    request.session.update(AuthenticationService.session_data(user))


def _create_auth_response(user: User, access_token: str) -> AuthResponse:
    return AuthResponse(
        token=access_token,
        user=UserSummary(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.value,
        ),
    )


def _oauth_redirect(settings: Settings, success: bool) -> RedirectResponse:
    client_url = settings.client_url.rstrip("/")
    if success:
        url = f"{client_url}/dashboard?login=success"
    else:
        url = f"{client_url}/login?error=oauth_failed"
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Invalid input"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Create an account with a password.

    The access token is returned in the body and set as a cookie together
    with the refresh token; a server-side session is started as well.
    """
    user, access_token, refresh_token = await auth_service.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    await session.commit()

    _establish_login(request, response, user, access_token, refresh_token, settings)
    return _create_auth_response(user, access_token)


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Invalid input"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password.

    Unknown email, wrong password and password-less accounts all fail with
    the same message.
    """
    user, access_token, refresh_token = await auth_service.login(
        email=body.email,
        password=body.password,
    )
    await session.commit()

    _establish_login(request, response, user, access_token, refresh_token, settings)
    return _create_auth_response(user, access_token)


@router.post(
    "/logout",
    summary="Logout user",
    responses={
        200: {"description": "Logged out successfully"},
    },
)
async def logout(
    request: Request,
    response: Response,
    settings: SettingsDep,
) -> MessageResponse:
    """End the session and clear every authentication cookie."""
    request.session.clear()
    _clear_auth_cookies(response, settings)
    logger.debug("User logged out (session and auth cookies cleared)")
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/change-password",
    summary="Change password",
    responses={
        200: {"description": "Password changed successfully"},
        400: {"description": "New password too weak or not confirmed"},
        401: {"description": "Current password incorrect or not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
async def change_password(
    body: ChangePasswordRequest,
    identity: CurrentIdentity,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    """
    Change the current user's password.

    Requires the current password for verification and a new password
    that meets the complexity rule.
    """
    await auth_service.change_password(
        user_id=identity.user_id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    await session.commit()

    return MessageResponse(message="Password updated successfully")


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
@router.get(
    "/get-current-login-info",
    summary="Get current user",
    include_in_schema=False,
)
async def get_me(
    identity: CurrentIdentity,
    auth_service: AuthService,
) -> CurrentUserResponse:
    """
    Get the current authenticated user's information.

    Accepts a bearer token, the access token cookie or the session.
    """
    user = await auth_service.get_user(identity.user_id)
    return CurrentUserResponse(
        user=UserProfileResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.value,
            avatar=user.avatar,
            is_active=user.is_active,
            created_at=user.created_at,
            last_login=user.last_login,
        ),
    )


@router.post(
    "/refresh",
    summary="Refresh access token",
    responses={
        200: {"description": "Access token refreshed"},
        401: {"description": "No refresh token provided"},
        403: {"description": "Invalid or expired refresh token"},
    },
)
async def refresh_token(
    response: Response,
    auth_service: AuthService,
    settings: SettingsDep,
    body: RefreshRequest | None = None,
    refresh_token_cookie: Annotated[
        str | None,
        Cookie(alias=REFRESH_TOKEN_COOKIE),
    ] = None,
) -> RefreshResponse:
    """
    Get a new access token using a valid refresh token.

    The refresh token can be provided either in the request body
    (``refreshToken``) or via the HttpOnly cookie.
    """
    token = None
    if body and body.refresh_token:
        token = body.refresh_token
    elif refresh_token_cookie:
        token = refresh_token_cookie

    if not token:
        raise AuthenticationError("Refresh token required")

    access_token = await auth_service.refresh_access_token(token)
    _set_token_cookies(response, settings, access_token=access_token)
    return RefreshResponse(access_token=access_token)


@router.get(
    "/google",
    summary="Start Google login",
    status_code=status.HTTP_302_FOUND,
    responses={
        302: {"description": "Redirect to Google"},
        503: {"description": "Google login not configured"},
    },
)
async def google_login(request: Request, google: GoogleClient) -> RedirectResponse:
    """Redirect the browser to Google's consent screen."""
    if not google.is_configured():
        raise OAuthNotConfiguredError
    state = secrets.token_urlsafe(32)
    request.session[OAUTH_STATE_SESSION_KEY] = state
    return RedirectResponse(
        google.authorization_url(state),
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/google/callback",
    summary="Google login callback",
    status_code=status.HTTP_302_FOUND,
    responses={
        302: {"description": "Redirect to the client application"},
    },
)
async def google_callback(  # NOQA: PLR0913
    request: Request,
    google: GoogleClient,
    oauth_service: OAuthService,
    session: DBSession,
    settings: SettingsDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """
    Finish the Google login.

    Always answers with a redirect to the client application; failures only
    carry an opaque ``error=oauth_failed`` indicator.
    """
    expected_state = request.session.pop(OAUTH_STATE_SESSION_KEY, None)
    try:
        if error:
            msg = f"Google returned error: {error}"
            raise OAuthProviderError(msg)
        if (
            not code
            or not state
            or not expected_state
            or not secrets.compare_digest(state, expected_state)
        ):
            raise OAuthStateMismatchError

        profile = await google.fetch_profile_for_code(code)
        resolution, access_token, refresh_token = await oauth_service.login(profile)
        await session.commit()
    except DomainException as e:
        await session.rollback()
        logger.warning("Google login failed: %r", e)
        return _oauth_redirect(settings, success=False)
    except Exception:
        await session.rollback()
        logger.exception("Google login failed unexpectedly")
        return _oauth_redirect(settings, success=False)

    response = _oauth_redirect(settings, success=True)
    _establish_login(
        request,
        response,
        resolution.user,
        access_token,
        refresh_token,
        settings,
    )
    return response


def _identity_response(identity: AuthenticatedIdentity) -> IdentityResponse:
    return IdentityResponse(
        id=identity.user_id,
        email=identity.email,
        role=identity.role.value,
        method=identity.method,
    )


@router.get("/protected", summary="Example route requiring authentication")
async def protected(identity: CurrentIdentity) -> ProtectedResponse:
    return ProtectedResponse(
        message="This is a protected route",
        user=_identity_response(identity),
    )


@router.get(
    "/protected/admin",
    summary="Example route requiring the admin role",
    responses={403: {"description": "Caller is not an admin"}},
)
async def protected_admin(
    identity: Annotated[
        AuthenticatedIdentity,
        Depends(require_role(UserRole.ADMIN)),
    ],
) -> ProtectedResponse:
    return ProtectedResponse(
        message="This is an admin-only route",
        user=_identity_response(identity),
    )

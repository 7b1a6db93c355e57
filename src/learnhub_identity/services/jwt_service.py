"""JWT token service.

Provides JWT token creation and verification for authentication.
"""

import logging
from datetime import timedelta
from uuid import UUID, uuid4

import jwt

from learnhub.domain.shared.time import from_epoch, utc_now
from learnhub_identity.exceptions import InvalidTokenError
from learnhub_identity.schemas import TokenPayload

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived)
    for user authentication. Both carry the subject id, email and role.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token(user_id, "user@example.com", "student")
    >>> payload = service.verify_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_HOURS = 24
    DEFAULT_REFRESH_EXPIRE_DAYS = 30
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        access_token_expire_hours: int = DEFAULT_ACCESS_EXPIRE_HOURS,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        access_token_expire_hours
            Hours until access token expires (default 24)
        refresh_token_expire_days
            Days until refresh token expires (default 30)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(hours=access_token_expire_hours)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)

    @property
    def access_token_ttl(self) -> timedelta:
        return self._access_expire

    @property
    def refresh_token_ttl(self) -> timedelta:
        return self._refresh_expire

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        role: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        email
            The user's email address
        role
            The user's role value
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            user_id=user_id,
            email=email,
            role=role,
            token_type=ACCESS_TOKEN_TYPE,
            expires_delta=(
                expires_delta if expires_delta is not None else self._access_expire
            ),
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        email: str,
        role: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens are used to obtain new access tokens without
        requiring the user to log in again.

        Parameters
        ----------
        user_id
            The user's unique identifier
        email
            The user's email address
        role
            The user's role value
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            user_id=user_id,
            email=email,
            role=role,
            token_type=REFRESH_TOKEN_TYPE,
            expires_delta=(
                expires_delta if expires_delta is not None else self._refresh_expire
            ),
        )

    def verify_token(
        self,
        token: str,
        expected_type: str | None = None,
    ) -> TokenPayload:
        """Verify and decode a JWT token.

        Parameters
        ----------
        token
            The JWT token string to verify
        expected_type
            If given, reject tokens of any other type ("access"/"refresh")

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or of the wrong type.
            ``reason`` tells the cases apart for logging.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )

            result = TokenPayload(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
                exp=from_epoch(payload["exp"]),
                token_type=payload.get("type", ACCESS_TOKEN_TYPE),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError(
                "Token has expired", reason=InvalidTokenError.EXPIRED
            ) from e
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError(
                "Invalid token signature", reason=InvalidTokenError.INVALID_SIGNATURE
            ) from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(
                f"Invalid token: {e}", reason=InvalidTokenError.MALFORMED
            ) from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(
                f"Malformed token payload: {e}", reason=InvalidTokenError.MALFORMED
            ) from e

        if expected_type is not None and result.token_type != expected_type:
            raise InvalidTokenError(
                f"Expected {expected_type} token, got {result.token_type}",
                reason=InvalidTokenError.WRONG_TYPE,
            )

        return result

    def _create_token(
        self,
        user_id: UUID,
        email: str,
        role: str,
        token_type: str,
        expires_delta: timedelta,
    ) -> str:
        now = utc_now()
        expire = now + expires_delta

        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "type": token_type,
            "iat": now,
            "exp": expire,
            "jti": uuid4().hex,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

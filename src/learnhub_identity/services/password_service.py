"""Password hashing service using bcrypt.

Provides secure password hashing and verification together with the
password complexity rule shared by registration and password change.
"""

import re

import bcrypt
from anyio import to_thread

from learnhub_identity.exceptions import WeakPasswordError

# Lowercase, uppercase, digit and one of @$!%*?&; nothing outside that set.
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)
PASSWORD_COMPLEXITY_MESSAGE = (
    "Password must contain at least one uppercase, one lowercase, "
    "one number and one special character"
)
# bcrypt only looks at the first 72 bytes of the encoded password
PASSWORD_MAX_BYTES = 72
PASSWORD_TOO_LONG_MESSAGE = f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes"


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Also provides password strength validation.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("Str0ng!Pwd")
    >>> service.verify("Str0ng!Pwd", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    MIN_LENGTH = 8

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
            Higher values are more secure but slower.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password with a fresh salt.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a hash.

        A missing hash (OAuth-only account) or a malformed one is a
        mismatch, not an error.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    async def hash_async(self, password: str) -> str:
        """Hash in a worker thread so the event loop keeps serving requests."""
        return await to_thread.run_sync(self.hash, password)

    async def verify_async(self, password: str, password_hash: str | None) -> bool:
        """Verify in a worker thread so the event loop keeps serving requests."""
        return await to_thread.run_sync(self.verify, password, password_hash)

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets strength requirements.

        Current requirements:
        - Minimum 8 characters, at most 72 bytes
        - At least one lowercase, uppercase, digit and symbol from @$!%*?&
        - No characters outside letters, digits and those symbols

        Parameters
        ----------
        password
            The password to validate

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise WeakPasswordError(PASSWORD_TOO_LONG_MESSAGE)

        if not PASSWORD_PATTERN.match(password):
            raise WeakPasswordError(PASSWORD_COMPLEXITY_MESSAGE)

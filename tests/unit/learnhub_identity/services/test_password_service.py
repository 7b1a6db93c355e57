"""Unit tests for PasswordHashingService."""

import pytest

from learnhub_identity.exceptions import WeakPasswordError
from learnhub_identity.services import PasswordHashingService

STRONG_PASSWORD = "Str0ng!Pwd"

# Low cost keeps the suite fast; production uses the configured rounds.
TEST_ROUNDS = 4


class TestPasswordHashing:
    """Tests for hashing and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=TEST_ROUNDS)

    def test_hash_then_verify(self):
        """A password verifies against its own hash."""
        password_hash = self.service.hash(STRONG_PASSWORD)

        assert password_hash != STRONG_PASSWORD
        assert self.service.verify(STRONG_PASSWORD, password_hash)

    def test_verify_rejects_other_password(self):
        """A different password does not verify."""
        password_hash = self.service.hash(STRONG_PASSWORD)

        assert not self.service.verify("An0ther!Pwd", password_hash)

    def test_hash_uses_fresh_salt(self):
        """Hashing the same password twice gives different hashes."""
        first = self.service.hash(STRONG_PASSWORD)
        second = self.service.hash(STRONG_PASSWORD)

        assert first != second
        assert self.service.verify(STRONG_PASSWORD, first)
        assert self.service.verify(STRONG_PASSWORD, second)

    def test_hash_embeds_configured_rounds(self):
        password_hash = self.service.hash(STRONG_PASSWORD)

        assert password_hash.startswith(f"$2b${TEST_ROUNDS:02d}$")

    @pytest.mark.parametrize("bad_hash", [None, "", "not-a-bcrypt-hash", "$2b$04$"])
    def test_verify_returns_false_for_missing_or_malformed_hash(self, bad_hash):
        """OAuth-only accounts (no hash) and corrupt hashes never verify."""
        assert self.service.verify(STRONG_PASSWORD, bad_hash) is False

    def test_verify_returns_false_for_empty_password(self):
        password_hash = self.service.hash(STRONG_PASSWORD)

        assert self.service.verify("", password_hash) is False

    async def test_async_variants_match_sync(self):
        """Thread-offloaded hashing behaves like the synchronous version."""
        password_hash = await self.service.hash_async(STRONG_PASSWORD)

        assert await self.service.verify_async(STRONG_PASSWORD, password_hash)
        assert not await self.service.verify_async("Wr0ng!Pwd", password_hash)


class TestPasswordStrength:
    """Tests for the complexity rule."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=TEST_ROUNDS)

    @pytest.mark.parametrize(
        "password",
        ["Str0ng!Pwd", "An0ther!Pwd", "aB3@aaaa", "Zz9?Zz9?Zz9?"],
    )
    def test_accepts_complex_passwords(self, password):
        self.service.validate_strength(password)

    @pytest.mark.parametrize(
        "password",
        [
            "alllowercase1!",  # no uppercase
            "ALLUPPERCASE1!",  # no lowercase
            "NoDigitsHere!",  # no digit
            "NoSymbol123",  # no symbol
            "Bad#Symbol1a",  # symbol outside the allowed set
            "Spaces 1!Aa",  # whitespace not allowed
        ],
    )
    def test_rejects_passwords_missing_a_class(self, password):
        with pytest.raises(WeakPasswordError, match="at least one uppercase"):
            self.service.validate_strength(password)

    def test_rejects_short_password(self):
        with pytest.raises(WeakPasswordError, match="at least 8 characters"):
            self.service.validate_strength("Sh0rt!")

    def test_rejects_empty_password(self):
        with pytest.raises(WeakPasswordError, match="cannot be empty"):
            self.service.validate_strength("")

    def test_hash_refuses_weak_password(self):
        with pytest.raises(WeakPasswordError):
            self.service.hash("weakpassword")


    def test_rejects_password_over_72_bytes(self):
        with pytest.raises(WeakPasswordError, match="cannot exceed 72 bytes"):
            self.service.validate_strength("Str0ng!Pwd" + "a" * 63)

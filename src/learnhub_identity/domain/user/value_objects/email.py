"""Email address value object.

Emails identify accounts, so two spellings that differ only in case or
surrounding whitespace must compare equal and hit the same database row.
Syntax is checked with pydantic's ``validate_email``, the same check behind
``EmailStr`` in the request schemas, so an address the API accepts is never
rejected here.
"""

from dataclasses import dataclass

from pydantic import validate_email
from pydantic_core import PydanticCustomError

from learnhub_identity.domain.user.exceptions import InvalidEmailError


def normalize_email(raw: str) -> str:
    return raw.strip().lower()


@dataclass(frozen=True)
class Email:
    """A syntactically valid, lowercased email address."""

    value: str

    def __post_init__(self) -> None:
        stripped = (self.value or "").strip()
        if not stripped:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        try:
            _, address = validate_email(stripped)
        except PydanticCustomError as e:
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg) from e

        object.__setattr__(self, "value", normalize_email(address))

    def __str__(self) -> str:
        return self.value

"""Turning request validation failures into client-facing messages.

Request bodies are validated by pydantic before any handler runs, so a
rejected payload never reaches the credential store or the password hasher.
This module only decides how the collected errors are phrased.
"""

from collections.abc import Sequence
from typing import Any

from learnhub.domain.shared.exceptions import ErrorCode

# Error types raised by our own validators; their message is used verbatim.
CUSTOM_ERROR_TYPES = frozenset(
    {
        "password_complexity",
        "password_mismatch",
        "password_too_long",
        "name_blank",
    }
)

VALIDATION_ERROR_MESSAGE = "Validation error"


def _field_label(loc: Sequence[Any]) -> str:
    # Drop the request part ("body", "query", ...) FastAPI prefixes
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else []
    return ".".join(parts)


def format_error(error: dict[str, Any]) -> str:
    """Render a single pydantic error dict as one readable message."""
    message = str(error.get("msg", "Invalid value"))
    if error.get("type") in CUSTOM_ERROR_TYPES:
        return message

    # pydantic prefixes messages of plain ValueErrors
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]

    label = _field_label(error.get("loc", ()))
    if not label:
        return message
    return f"{label}: {message}"


def format_errors(errors: Sequence[dict[str, Any]]) -> list[str]:
    """All messages, in the order pydantic reported them."""
    return [format_error(error) for error in errors]


def build_validation_body(
    errors: Sequence[dict[str, Any]],
    collect_all: bool = False,
) -> dict[str, Any]:
    """Response body for a rejected request.

    Parameters
    ----------
    errors
        ``RequestValidationError.errors()``
    collect_all
        Report every violated rule instead of only the first one

    Returns
    -------
    ``{"success": False, "message": ..., "code": "VALIDATION_ERROR"}`` plus a
    ``details`` list when ``collect_all`` is set.
    """
    messages = format_errors(errors) or ["Invalid request"]
    body: dict[str, Any] = {
        "success": False,
        "message": VALIDATION_ERROR_MESSAGE if collect_all else messages[0],
        "code": ErrorCode.VALIDATION_ERROR.value,
    }
    if collect_all:
        body["details"] = messages
    return body

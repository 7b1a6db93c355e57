"""Error taxonomy and UTC helpers used by every LearnHub package."""

from learnhub.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    InternalError,
    ValidationError,
)
from learnhub.domain.shared.time import as_utc, from_epoch, utc_now

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainException",
    "EntityNotFoundError",
    "ErrorCode",
    "InternalError",
    "ValidationError",
    "as_utc",
    "from_epoch",
    "utc_now",
]

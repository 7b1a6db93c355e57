"""UTC helpers. Every timestamp in LearnHub is timezone-aware UTC."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC; naive values are taken to be UTC already.

    SQLite hands back naive datetimes even for ``DateTime(timezone=True)``.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def from_epoch(seconds: float) -> datetime:
    """Aware UTC datetime from a Unix timestamp (JWT ``exp``/``iat``)."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)

"""Common helpers for the Rentify backend."""

import re
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def sanitize_string(value: str | None, max_length: int = 255) -> str | None:
    """Strip whitespace and truncate; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return value[:max_length]


def slugify(value: str, separator: str = "-") -> str:
    """Collapse whitespace runs to a separator ("National ID" -> "National-ID")."""
    return re.sub(r"\s+", separator, value.strip())

import re
from datetime import UTC, date, datetime
from uuid import UUID

from goaltracker.errors import NotFoundError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)


def parse_id(value: str | UUID) -> UUID:
    """Parse a row id taken from a URL. Malformed ids are reported as not found."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError:
        raise NotFoundError from None


def parse_date(value: str) -> date:
    """Parse an ISO `YYYY-MM-DD` date, raising ValueError otherwise."""
    return date.fromisoformat(value)


def is_local_path(value: str) -> bool:
    """Whether `value` is a same-origin path safe to redirect to."""
    return value.startswith("/") and not value.startswith("//") and "\\" not in value

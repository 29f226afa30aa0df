"""Datetime utilities."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value) -> datetime | None:
    """Parse an ISO 8601 or RFC 2822 timestamp into an aware UTC datetime.

    Returns None for empty values. Raises ValueError for unparseable strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Unrecognised timestamp: {value!r}") from exc
        if parsed is None:
            raise ValueError(f"Unrecognised timestamp: {value!r}")
    return ensure_utc(parsed)

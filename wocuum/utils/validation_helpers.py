from datetime import datetime, timezone
from typing import Iterable, List, Optional

from wocuum.errors import ValidationFailed


def find_missing_fields(values: dict, required: Iterable[str]) -> List[str]:
    """Names from ``required`` whose value is absent or blank, in the given order."""
    return [name for name in required if not str(values.get(name) or "").strip()]


def parse_booking_date(value: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse an ISO 8601 booking date and check that it lies in the future.

    Dates without an offset are read as UTC. Returns a naive UTC datetime.
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationFailed("Invalid date format")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)

    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    if parsed <= now:
        raise ValidationFailed("Booking date must be in the future")
    return parsed


def format_location(address: str, city: str) -> str:
    """'Hämeenkatu 1', 'tampere' -> 'Hämeenkatu 1, Tampere'. Only the first letter changes."""
    return f"{address}, {city[:1].upper()}{city[1:]}"

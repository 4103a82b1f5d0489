from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def to_local_naive(value: datetime) -> datetime:
    """Express ``value`` as naive local time; naive values are assumed local already."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as sent by the attendance service.

    A trailing ``Z`` or an explicit offset is accepted and converted to naive
    local time, the same reference as ``now_local``. Empty values give ``None``.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")


def now_local() -> datetime:
    """Current local time as a naive datetime.

    Note: Kept as a function so tests can patch it.
    """
    return datetime.now()

"""Date helpers. Every comparison happens on timezone-aware UTC values."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated, Any, Optional

from pydantic import AfterValidator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Coerce ISO strings, dates and datetimes into aware UTC datetimes.

    Naive values are taken to be UTC. Returns None for empty or unparseable
    input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# Request-model field type; naive input is read as UTC so aware and naive values compare.
UtcDatetime = Annotated[datetime, AfterValidator(parse_datetime)]


def is_date_in_past(value: Any, *, now: Optional[datetime] = None) -> bool:
    when = parse_datetime(value)
    return when is not None and when < (parse_datetime(now) or utcnow())


def is_date_in_future(value: Any, *, now: Optional[datetime] = None) -> bool:
    when = parse_datetime(value)
    return when is not None and when >= (parse_datetime(now) or utcnow())


def is_date_within_last_days(value: Any, days: int, *, now: Optional[datetime] = None) -> bool:
    when = parse_datetime(value)
    if when is None:
        return False
    cutoff = (parse_datetime(now) or utcnow()) - timedelta(days=days)
    return when >= cutoff


def format_date(value: Any) -> str:
    """Long display form, e.g. ``Mon, Jan 15, 2024, 10:30``."""
    when = parse_datetime(value)
    if when is None:
        return ""
    return when.strftime("%a, %b %d, %Y, %H:%M")


def format_date_short(value: Any) -> str:
    when = parse_datetime(value)
    if when is None:
        return ""
    return when.strftime("%m/%d/%Y")


def to_iso_date(value: Any) -> Optional[str]:
    when = parse_datetime(value)
    return when.date().isoformat() if when else None

"""Temporal status of an event relative to now (UTC)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.domain.common.dates import parse_datetime, utcnow
from portal.domain.common.pipeline import record_field


def _now(now: Optional[datetime]) -> datetime:
    return parse_datetime(now) or utcnow()


def is_event_in_past(event, *, now: Optional[datetime] = None) -> bool:
    """The event finished (or, without an end, started) before now."""
    ends = parse_datetime(record_field(event, "end_at") or record_field(event, "start_at"))
    return ends is not None and ends < _now(now)


def is_event_upcoming(event, *, now: Optional[datetime] = None) -> bool:
    starts = parse_datetime(record_field(event, "start_at"))
    return starts is not None and starts > _now(now)


def is_event_ongoing(event, *, now: Optional[datetime] = None) -> bool:
    """Started at or before now and not yet ended; both bounds inclusive."""
    current = _now(now)
    starts = parse_datetime(record_field(event, "start_at"))
    if starts is None or starts > current:
        return False
    ends = parse_datetime(record_field(event, "end_at"))
    return ends is None or ends >= current

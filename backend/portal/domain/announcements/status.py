from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.domain.common.dates import parse_datetime, utcnow
from portal.domain.common.pipeline import record_field


def is_announcement_expired(announcement, *, now: Optional[datetime] = None) -> bool:
    """True only once now is strictly after the deadline."""
    deadline = parse_datetime(record_field(announcement, "deadline"))
    if deadline is None:
        return False
    return deadline < (parse_datetime(now) or utcnow())


def is_announcement_active(announcement, *, now: Optional[datetime] = None) -> bool:
    return not is_announcement_expired(announcement, now=now)

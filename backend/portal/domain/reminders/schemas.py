from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from portal.domain.common.dates import UtcDatetime

ReminderTargetType = Literal["event", "announcement"]


class ReminderCreateRequest(BaseModel):
    target_type: ReminderTargetType
    target_id: str
    # Defaults to 09:00 UTC on the day before the event start or deadline.
    reminder_at: Optional[UtcDatetime] = None

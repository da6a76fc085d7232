"""Domain models for reminders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass
class Reminder:
    id: str
    user_id: str
    target_type: str  # event | announcement
    target_id: str
    reminder_at: datetime
    status: str = "pending"  # pending | sent | failed | cancelled
    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ReminderEventDetail:
    id: str
    title: str
    start_at: Optional[datetime] = None
    location: Optional[str] = None


@dataclass
class ReminderAnnouncementDetail:
    id: str
    title: str
    deadline: Optional[datetime] = None


@dataclass
class ReminderWithDetails(Reminder):
    event: Optional[ReminderEventDetail] = None
    announcement: Optional[ReminderAnnouncementDetail] = None


@dataclass
class ReminderCounts:
    events: Dict[str, int] = field(default_factory=dict)
    announcements: Dict[str, int] = field(default_factory=dict)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from portal.domain.profiles.models import Profile, UserActivity


@dataclass
class DashboardStats:
    total_users: int = 0
    complete_profiles: int = 0
    upcoming_events: int = 0
    ongoing_events: int = 0
    active_announcements: int = 0
    recent_users: int = 0
    profile_completion_rate: int = 0


@dataclass
class ActivityItem:
    id: str
    type: str  # user | event | announcement
    title: str
    description: str
    timestamp: Optional[datetime]


@dataclass
class DashboardOverview:
    stats: DashboardStats
    recent_activity: List[ActivityItem] = field(default_factory=list)


@dataclass
class UserData:
    profiles: List[Profile] = field(default_factory=list)
    user_activity: List[UserActivity] = field(default_factory=list)

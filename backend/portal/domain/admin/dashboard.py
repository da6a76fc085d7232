"""Headline numbers and the recent-activity feed for the admin dashboard."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from portal.domain.admin.models import ActivityItem, DashboardStats
from portal.domain.announcements.models import Announcement
from portal.domain.announcements.status import is_announcement_active
from portal.domain.common.dates import is_date_within_last_days, parse_datetime, utcnow
from portal.domain.common.stats import percent
from portal.domain.events.models import Event
from portal.domain.events.status import is_event_ongoing, is_event_upcoming
from portal.domain.profiles.models import Profile
from portal.domain.profiles.service import is_profile_complete

RECENT_USERS_DAYS = 30
ACTIVITY_WINDOW_DAYS = 7
ACTIVITY_PER_KIND = 3
ACTIVITY_LIMIT = 5


def compute_dashboard_stats(
    profiles: Sequence[Profile],
    alumni: Sequence[Profile],
    events: Sequence[Event],
    announcements: Sequence[Announcement],
    *,
    now: Optional[datetime] = None,
) -> DashboardStats:
    """``total_users`` counts every profile; completeness counts alumni only."""
    now = now or utcnow()
    complete = sum(1 for p in alumni if is_profile_complete(p))
    return DashboardStats(
        total_users=len(profiles),
        complete_profiles=complete,
        upcoming_events=sum(1 for e in events if is_event_upcoming(e, now=now)),
        ongoing_events=sum(1 for e in events if is_event_ongoing(e, now=now)),
        active_announcements=sum(1 for a in announcements if is_announcement_active(a, now=now)),
        recent_users=sum(1 for p in alumni if is_date_within_last_days(p.created_at, RECENT_USERS_DAYS, now=now)),
        profile_completion_rate=percent(complete, len(profiles)),
    )


def recent_activity(
    alumni: Sequence[Profile],
    events: Sequence[Event],
    announcements: Sequence[Announcement],
    *,
    now: Optional[datetime] = None,
) -> List[ActivityItem]:
    now = now or utcnow()

    def recent(items):
        return [i for i in items if is_date_within_last_days(i.created_at, ACTIVITY_WINDOW_DAYS, now=now)][
            :ACTIVITY_PER_KIND
        ]

    items = [
        ActivityItem(
            id=p.id,
            type="user",
            title=f"New user: {p.full_name or 'Anonymous'}",
            description=p.bio or "No bio provided",
            timestamp=p.created_at,
        )
        for p in recent(alumni)
    ]
    items += [
        ActivityItem(
            id=e.id,
            type="event",
            title=f"New event: {e.title}",
            description=e.description or "No description",
            timestamp=e.created_at,
        )
        for e in recent(events)
    ]
    items += [
        ActivityItem(
            id=a.id,
            type="announcement",
            title=f"New announcement: {a.title}",
            description=a.content or "No content",
            timestamp=a.created_at,
        )
        for a in recent(announcements)
    ]
    items.sort(key=lambda item: parse_datetime(item.timestamp) or now, reverse=True)
    return items[:ACTIVITY_LIMIT]

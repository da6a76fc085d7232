from datetime import datetime, timedelta, timezone

import pytest

from portal.domain.admin.dashboard import compute_dashboard_stats, recent_activity
from portal.domain.admin.service import AdminService
from portal.domain.announcements.models import Announcement
from portal.domain.announcements.status import is_announcement_active, is_announcement_expired
from portal.domain.events.models import Event
from portal.domain.events.status import is_event_in_past, is_event_ongoing, is_event_upcoming
from portal.domain.profiles.models import Profile
from tests.stubs import db_error, install_pool

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _event(event_id, start, end=None, created=None):
    return Event(id=event_id, title=f"Event {event_id}", start_at=start, end_at=end, created_at=created)


def test_event_status_boundaries():
    ongoing = _event("1", NOW - timedelta(hours=1), NOW)
    upcoming = _event("2", NOW + timedelta(days=1))
    finished = _event("3", NOW - timedelta(days=2), NOW - timedelta(days=1))
    open_ended = _event("4", NOW - timedelta(minutes=5))

    assert is_event_ongoing(ongoing, now=NOW)
    assert not is_event_in_past(ongoing, now=NOW)
    assert is_event_upcoming(upcoming, now=NOW)
    assert not is_event_ongoing(upcoming, now=NOW)
    assert is_event_in_past(finished, now=NOW)
    assert is_event_ongoing(open_ended, now=NOW)
    assert is_event_in_past(open_ended, now=NOW)


def test_announcement_expiry():
    assert not is_announcement_expired(Announcement(id="a", title="No deadline"), now=NOW)
    assert not is_announcement_expired(Announcement(id="b", title="Today", deadline=NOW), now=NOW)
    assert is_announcement_expired(Announcement(id="c", title="Old", deadline=NOW - timedelta(seconds=1)), now=NOW)
    assert is_announcement_active({"deadline": "2024-07-01T00:00:00Z"}, now=NOW)


def test_dashboard_stats():
    complete = dict(full_name="Ada", bio="Hi", company="Acme", job_title="CTO")
    alumni = [
        Profile(id="1", user_id="1", created_at=NOW - timedelta(days=3), **complete),
        Profile(id="2", user_id="2", created_at=NOW - timedelta(days=90)),
    ]
    profiles = alumni + [Profile(id="3", user_id="3", user_type="Staff"), Profile(id="4", user_id="4")]
    events = [
        _event("e1", NOW + timedelta(days=2)),
        _event("e2", NOW - timedelta(hours=1), NOW + timedelta(hours=1)),
        _event("e3", NOW - timedelta(days=5), NOW - timedelta(days=4)),
    ]
    announcements = [
        Announcement(id="a1", title="Open"),
        Announcement(id="a2", title="Closed", deadline=NOW - timedelta(days=1)),
    ]

    stats = compute_dashboard_stats(profiles, alumni, events, announcements, now=NOW)

    assert stats.total_users == 4
    assert stats.complete_profiles == 1
    assert stats.upcoming_events == 1
    assert stats.ongoing_events == 1
    assert stats.active_announcements == 1
    assert stats.recent_users == 1
    assert stats.profile_completion_rate == 25


def test_recent_activity_is_newest_first_and_capped():
    alumni = [Profile(id=f"p{i}", user_id=str(i), full_name=None, created_at=NOW - timedelta(hours=i)) for i in range(4)]
    events = [_event("e1", NOW, created=NOW - timedelta(minutes=30))]
    announcements = [Announcement(id="a1", title="Old", created_at=NOW - timedelta(days=30))]

    items = recent_activity(alumni, events, announcements, now=NOW)

    assert len(items) == 4
    assert [i.id for i in items] == ["p0", "e1", "p1", "p2"]
    assert items[0].title == "New user: Anonymous"
    assert items[0].description == "No bio provided"


@pytest.mark.asyncio
async def test_remove_user_is_a_soft_delete(monkeypatch):
    conn = install_pool(monkeypatch, AdminService)
    assert await AdminService().remove_user("p1") is True
    assert "SET removed = TRUE" in conn.queries[0][0]

    conn.execute_rets = [db_error()]
    assert await AdminService().remove_user("p1") is False


def test_ongoing_includes_both_bounds():
    event = _event("b", NOW - timedelta(hours=2), NOW + timedelta(hours=2))
    assert is_event_ongoing(event, now=event.start_at)
    assert is_event_ongoing(event, now=event.end_at)
    assert not is_event_ongoing(event, now=event.end_at + timedelta(microseconds=1))

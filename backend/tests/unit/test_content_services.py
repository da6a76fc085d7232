import uuid
from datetime import datetime, timedelta, timezone

import pytest

from portal.domain.announcements.schemas import AnnouncementWriteRequest
from portal.domain.announcements.service import AnnouncementService
from portal.domain.events.schemas import EventWriteRequest
from portal.domain.events.service import EventService
from portal.domain.tags.service import TagService, replace_tags
from tests.stubs import StubConnection, db_error, install_pool

START = datetime(2024, 9, 1, 18, 0, tzinfo=timezone.utc)


def _event_row(event_id, **overrides):
    row = {
        "id": event_id,
        "title": "Alumni mixer",
        "description": "Drinks",
        "location": "Dublin",
        "location_url": None,
        "registration_url": None,
        "start_at": START,
        "end_at": None,
        "organiser_profile_id": "p1",
        "created_by": "u1",
        "image_url": None,
        "created_at": START,
        "updated_at": START,
        "organiser_full_name": "Ada Lovelace",
        "organiser_email": "ada@example.com",
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_get_events_attaches_tags_and_organiser(monkeypatch):
    conn = install_pool(monkeypatch, EventService)
    event_id = uuid.uuid4()
    conn.fetch_rets = [
        [_event_row(event_id)],
        [{"entity_id": event_id, "id": "t1", "name": "Social", "color": "#ef4444"}],
    ]

    events = await EventService().get_events()

    assert len(events) == 1
    event = events[0]
    assert event.id == str(event_id)
    assert [t.name for t in event.tags] == ["Social"]
    assert event.organiser.full_name == "Ada Lovelace"
    assert event.image_url.startswith("https://picsum.photos/seed/event")
    assert "ORDER BY e.start_at ASC" in conn.queries[0][0]


@pytest.mark.asyncio
async def test_get_events_returns_empty_list_on_db_error(monkeypatch):
    conn = install_pool(monkeypatch, EventService)
    conn.fetch_rets = [db_error()]
    assert await EventService().get_events() == []


@pytest.mark.asyncio
async def test_create_event_writes_tags_in_transaction(monkeypatch):
    conn = install_pool(monkeypatch, EventService)
    conn.fetchval_rets = ["e1"]
    conn.fetchrow_rets = [_event_row("e1", image_url="https://cdn.example/e1.png")]
    conn.fetch_rets = [[]]
    payload = EventWriteRequest(title="Alumni mixer", start_at=START, tag_ids=["t1", "t2", "t1"])

    event = await EventService().create_event(payload, "u1")

    assert event is not None
    assert event.image_url == "https://cdn.example/e1.png"
    assert conn.transactions == 1
    assert conn.executemany_calls == [[("e1", "t1"), ("e1", "t2")]]


@pytest.mark.asyncio
async def test_create_announcement_rolls_back_when_tags_fail(monkeypatch):
    conn = install_pool(monkeypatch, AnnouncementService)
    conn.fetchval_rets = ["a1"]
    # DELETE of old relations succeeds, the relation insert fails
    conn.execute_rets = ["DELETE 0", db_error("tag insert failed")]
    payload = AnnouncementWriteRequest(title="Call for mentors", tag_ids=["t1"])

    result = await AnnouncementService().create_announcement(payload, "u1")

    assert result is None
    assert conn.rollbacks == 1


@pytest.mark.asyncio
async def test_update_event_keeps_tags_when_not_supplied(monkeypatch):
    conn = install_pool(monkeypatch, EventService)
    conn.fetchval_rets = ["e1"]
    conn.fetchrow_rets = [_event_row("e1")]
    payload = EventWriteRequest(title="Renamed", start_at=START)

    event = await EventService().update_event("e1", payload)

    assert event is not None
    assert not any("DELETE FROM event_tags" in q for q, _ in conn.queries)


@pytest.mark.asyncio
async def test_update_missing_announcement_returns_none(monkeypatch):
    conn = install_pool(monkeypatch, AnnouncementService)
    conn.fetchval_rets = [None]
    payload = AnnouncementWriteRequest(title="Gone", tag_ids=[])
    assert await AnnouncementService().update_announcement("missing", payload) is None


@pytest.mark.asyncio
async def test_delete_event_removes_relations_first(monkeypatch):
    conn = install_pool(monkeypatch, EventService)
    assert await EventService().delete_event("e1") is True
    assert "event_tags" in conn.queries[0][0]
    assert "DELETE FROM events" in conn.queries[1][0]


@pytest.mark.asyncio
async def test_replace_tags_without_ids_only_clears():
    conn = StubConnection()
    await replace_tags(conn, "announcement_tags", "a1", None)
    assert len(conn.queries) == 1
    assert conn.executemany_calls == []


@pytest.mark.asyncio
async def test_tag_service_crud(monkeypatch):
    conn = install_pool(monkeypatch, TagService)
    conn.fetch_rets = [[{"id": "t1", "name": "Career", "color": "#8b5cf6"}]]
    conn.fetchrow_rets = [{"id": "t2", "name": "Online", "color": "#6366f1"}, None]

    svc = TagService()
    tags = await svc.get_tags()
    created = await svc.create_tag("Online", "#6366f1")
    updated = await svc.update_tag("missing", "X", "#000000")

    assert [t.name for t in tags] == ["Career"]
    assert created.id == "t2"
    assert updated is None


def test_event_window_is_validated():
    with pytest.raises(ValueError):
        EventWriteRequest(title="Backwards", start_at=START, end_at=datetime(2024, 8, 1, tzinfo=timezone.utc))


def test_naive_times_are_read_as_utc():
    event = EventWriteRequest(title="Mixer", start_at="2024-05-01T10:00:00Z", end_at="2024-05-01T12:00:00")
    announcement = AnnouncementWriteRequest(title="Mentors", deadline=datetime(2024, 5, 1, 17))

    assert event.end_at.tzinfo is timezone.utc
    assert event.end_at - event.start_at == timedelta(hours=2)
    assert announcement.deadline == datetime(2024, 5, 1, 17, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_created_announcement_returns_its_tags(monkeypatch):
    conn = install_pool(monkeypatch, AnnouncementService)
    conn.fetchval_rets = ["a1"]
    conn.fetchrow_rets = [
        {"id": "a1", "title": "Call for mentors", "organiser_profile_id": None, "image_url": None},
    ]
    conn.fetch_rets = [
        [
            {"entity_id": "a1", "id": "t1", "name": "Career", "color": "#8b5cf6"},
            {"entity_id": "a1", "id": "t2", "name": "Online", "color": "#6366f1"},
        ]
    ]
    payload = AnnouncementWriteRequest(title="Call for mentors", tag_ids=["t1", "t2"])

    announcement = await AnnouncementService().create_announcement(payload, "u1")

    assert [t.id for t in announcement.tags] == ["t1", "t2"]
    assert conn.executemany_calls == [[("a1", "t1"), ("a1", "t2")]]
    assert announcement.organiser is None
    assert announcement.image_url.startswith("https://picsum.photos/seed/announcement")

"""Service for events and their tag relations."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import asyncpg

from portal.domain.common.images import random_event_image
from portal.domain.common.records import from_row, log_failure
from portal.domain.events import models
from portal.domain.events.schemas import EventWriteRequest
from portal.domain.tags.models import Tag
from portal.domain.tags.service import TagService, fetch_tags_for, replace_tags
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

_EVENT_SELECT = """
    SELECT e.id, e.title, e.description, e.location, e.location_url, e.registration_url,
        e.start_at, e.end_at, e.organiser_profile_id, e.created_by, e.image_url,
        e.created_at, e.updated_at,
        o.full_name AS organiser_full_name, o.email AS organiser_email
    FROM events e
    LEFT JOIN profiles o ON o.id = e.organiser_profile_id
"""


def _to_event(row: Mapping[str, Any], tags: List[Tag]) -> models.Event:
    organiser = None
    if row.get("organiser_profile_id"):
        organiser = models.Organiser(
            id=str(row["organiser_profile_id"]),
            full_name=row.get("organiser_full_name"),
            email=row.get("organiser_email"),
        )
    event = from_row(models.Event, row, tags=tags, organiser=organiser)
    if not event.image_url:
        event.image_url = random_event_image()
    return event


class EventService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def _load(self, conn, event_id: str) -> Optional[models.Event]:
        row = await conn.fetchrow(f"{_EVENT_SELECT} WHERE e.id = $1", event_id)
        if row is None:
            return None
        row = dict(row)
        tags = await fetch_tags_for(conn, "event_tags", [row["id"]])
        return _to_event(row, tags.get(str(row["id"]), []))

    async def get_events(self) -> List[models.Event]:
        """All events by start time, earliest first, with tags and organiser."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = [dict(r) for r in await conn.fetch(f"{_EVENT_SELECT} ORDER BY e.start_at ASC")]
                tags = await fetch_tags_for(conn, "event_tags", [r["id"] for r in rows])
        except DB_ERRORS:
            log_failure(logger, "events.list")
            return []
        return [_to_event(r, tags.get(str(r["id"]), [])) for r in rows]

    async def get_event(self, event_id: str) -> Optional[models.Event]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                return await self._load(conn, event_id)
        except DB_ERRORS:
            log_failure(logger, "events.get", event_id=event_id)
            return None

    async def create_event(self, data: EventWriteRequest, user_id: str) -> Optional[models.Event]:
        """Insert the event and its tag relations atomically."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    event_id = await conn.fetchval(
                        """
                        INSERT INTO events (
                            title, description, location, location_url, registration_url,
                            start_at, end_at, organiser_profile_id, image_url, created_by
                        )
                        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                        RETURNING id
                        """,
                        data.title,
                        data.description,
                        data.location,
                        data.location_url,
                        data.registration_url,
                        data.start_at,
                        data.end_at,
                        data.organiser_profile_id,
                        data.image_url,
                        user_id,
                    )
                    await replace_tags(conn, "event_tags", event_id, data.tag_ids)
                event = await self._load(conn, event_id)
        except DB_ERRORS:
            log_failure(logger, "events.create", user_id=user_id)
            return None
        obs_metrics.inc_content_write("event", "create")
        return event

    async def update_event(self, event_id: str, data: EventWriteRequest) -> Optional[models.Event]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    updated = await conn.fetchval(
                        """
                        UPDATE events SET
                            title = $2, description = $3, location = $4, location_url = $5,
                            registration_url = $6, start_at = $7, end_at = $8,
                            organiser_profile_id = $9, image_url = $10, updated_at = NOW()
                        WHERE id = $1
                        RETURNING id
                        """,
                        event_id,
                        data.title,
                        data.description,
                        data.location,
                        data.location_url,
                        data.registration_url,
                        data.start_at,
                        data.end_at,
                        data.organiser_profile_id,
                        data.image_url,
                    )
                    if updated is None:
                        return None
                    if data.tag_ids is not None:
                        await replace_tags(conn, "event_tags", event_id, data.tag_ids)
                event = await self._load(conn, event_id)
        except DB_ERRORS:
            log_failure(logger, "events.update", event_id=event_id)
            return None
        obs_metrics.inc_content_write("event", "update")
        return event

    async def delete_event(self, event_id: str) -> bool:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute("DELETE FROM event_tags WHERE event_id = $1", event_id)
                    await conn.execute("DELETE FROM events WHERE id = $1", event_id)
        except DB_ERRORS:
            log_failure(logger, "events.delete", event_id=event_id)
            return False
        obs_metrics.inc_content_write("event", "delete")
        return True

    async def get_tags(self) -> List[Tag]:
        return await TagService().get_tags()

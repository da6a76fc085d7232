"""Service for announcements and their tag relations."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import asyncpg

from portal.domain.announcements import models
from portal.domain.announcements.schemas import AnnouncementWriteRequest
from portal.domain.common.images import random_announcement_image
from portal.domain.common.records import from_row, log_failure
from portal.domain.events.models import Organiser
from portal.domain.tags.models import Tag
from portal.domain.tags.service import fetch_tags_for, replace_tags
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

_ANNOUNCEMENT_SELECT = """
    SELECT a.id, a.title, a.content, a.deadline, a.external_url, a.image_url,
        a.organiser_profile_id, a.created_by, a.created_at, a.updated_at,
        o.full_name AS organiser_full_name, o.email AS organiser_email
    FROM announcements a
    LEFT JOIN profiles o ON o.id = a.organiser_profile_id
"""


def _to_announcement(row: Mapping[str, Any], tags: List[Tag]) -> models.Announcement:
    organiser = None
    if row.get("organiser_profile_id"):
        organiser = Organiser(
            id=str(row["organiser_profile_id"]),
            full_name=row.get("organiser_full_name"),
            email=row.get("organiser_email"),
        )
    announcement = from_row(models.Announcement, row, tags=tags, organiser=organiser)
    if not announcement.image_url:
        announcement.image_url = random_announcement_image()
    return announcement


class AnnouncementService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def _load(self, conn, announcement_id: str) -> Optional[models.Announcement]:
        row = await conn.fetchrow(f"{_ANNOUNCEMENT_SELECT} WHERE a.id = $1", announcement_id)
        if row is None:
            return None
        row = dict(row)
        tags = await fetch_tags_for(conn, "announcement_tags", [row["id"]])
        return _to_announcement(row, tags.get(str(row["id"]), []))

    async def get_announcements(self) -> List[models.Announcement]:
        """Newest first."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = [dict(r) for r in await conn.fetch(f"{_ANNOUNCEMENT_SELECT} ORDER BY a.created_at DESC")]
                tags = await fetch_tags_for(conn, "announcement_tags", [r["id"] for r in rows])
        except DB_ERRORS:
            log_failure(logger, "announcements.list")
            return []
        return [_to_announcement(r, tags.get(str(r["id"]), [])) for r in rows]

    async def get_announcement(self, announcement_id: str) -> Optional[models.Announcement]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                return await self._load(conn, announcement_id)
        except DB_ERRORS:
            log_failure(logger, "announcements.get", announcement_id=announcement_id)
            return None

    async def create_announcement(
        self, data: AnnouncementWriteRequest, user_id: str
    ) -> Optional[models.Announcement]:
        """Insert the announcement and its tag relations in one transaction.

        A failing relation insert rolls the announcement back as well.
        """
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    announcement_id = await conn.fetchval(
                        """
                        INSERT INTO announcements (
                            title, content, deadline, external_url, image_url,
                            organiser_profile_id, created_by
                        )
                        VALUES ($1, $2, $3, $4, $5, $6, $7)
                        RETURNING id
                        """,
                        data.title,
                        data.content,
                        data.deadline,
                        data.external_url,
                        data.image_url,
                        data.organiser_profile_id,
                        user_id,
                    )
                    await replace_tags(conn, "announcement_tags", announcement_id, data.tag_ids)
                announcement = await self._load(conn, announcement_id)
        except DB_ERRORS:
            log_failure(logger, "announcements.create", user_id=user_id)
            return None
        obs_metrics.inc_content_write("announcement", "create")
        return announcement

    async def update_announcement(
        self, announcement_id: str, data: AnnouncementWriteRequest
    ) -> Optional[models.Announcement]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    updated = await conn.fetchval(
                        """
                        UPDATE announcements SET
                            title = $2, content = $3, deadline = $4, external_url = $5,
                            image_url = $6, organiser_profile_id = $7, updated_at = NOW()
                        WHERE id = $1
                        RETURNING id
                        """,
                        announcement_id,
                        data.title,
                        data.content,
                        data.deadline,
                        data.external_url,
                        data.image_url,
                        data.organiser_profile_id,
                    )
                    if updated is None:
                        return None
                    if data.tag_ids is not None:
                        await replace_tags(conn, "announcement_tags", announcement_id, data.tag_ids)
                announcement = await self._load(conn, announcement_id)
        except DB_ERRORS:
            log_failure(logger, "announcements.update", announcement_id=announcement_id)
            return None
        obs_metrics.inc_content_write("announcement", "update")
        return announcement

    async def delete_announcement(self, announcement_id: str) -> bool:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(
                        "DELETE FROM announcement_tags WHERE announcement_id = $1", announcement_id
                    )
                    await conn.execute("DELETE FROM announcements WHERE id = $1", announcement_id)
        except DB_ERRORS:
            log_failure(logger, "announcements.delete", announcement_id=announcement_id)
            return False
        obs_metrics.inc_content_write("announcement", "delete")
        return True

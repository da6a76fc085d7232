"""Service for per-user event and announcement reminders.

Reminders are only queued here; delivery and the status transitions that
follow are handled by the scheduled sender outside this service.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

import asyncpg

from portal.domain.common.dates import parse_datetime
from portal.domain.common.records import from_row, log_failure
from portal.domain.reminders import models
from portal.domain.reminders.schemas import ReminderCreateRequest, ReminderTargetType
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

_REMINDER_COLUMNS = (
    "id, user_id, target_type, target_id, reminder_at, status, sent_at, error_message, created_at, updated_at"
)
REMINDER_HOUR = time(9, 0)


def calculate_reminder_time(target_type: ReminderTargetType, target_date) -> Optional[datetime]:
    """09:00 UTC on the day before ``target_date``; same rule for both target types."""
    when = parse_datetime(target_date)
    if when is None:
        return None
    day_before = (when - timedelta(days=1)).date()
    return datetime.combine(day_before, REMINDER_HOUR, tzinfo=when.tzinfo)


class ReminderService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def _target_date(self, conn, target_type: ReminderTargetType, target_id: str):
        if target_type == "event":
            return await conn.fetchval("SELECT start_at FROM events WHERE id = $1", target_id)
        return await conn.fetchval("SELECT deadline FROM announcements WHERE id = $1", target_id)

    async def create_reminder(self, user_id: str, data: ReminderCreateRequest) -> Optional[models.Reminder]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                reminder_at = data.reminder_at
                if reminder_at is None:
                    target_date = await self._target_date(conn, data.target_type, data.target_id)
                    reminder_at = calculate_reminder_time(data.target_type, target_date)
                    if reminder_at is None:
                        logger.warning(
                            "Reminder target has no date",
                            extra={"target_type": data.target_type, "target_id": data.target_id},
                        )
                        return None
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO reminders (user_id, target_type, target_id, reminder_at)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {_REMINDER_COLUMNS}
                    """,
                    user_id,
                    data.target_type,
                    data.target_id,
                    reminder_at,
                )
        except DB_ERRORS:
            log_failure(logger, "reminders.create", user_id=user_id)
            return None
        obs_metrics.inc_reminder_change("create")
        return from_row(models.Reminder, row) if row else None

    async def remove_reminder(self, user_id: str, target_id: str, target_type: ReminderTargetType) -> bool:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute(
                    "DELETE FROM reminders WHERE user_id = $1 AND target_id = $2 AND target_type = $3",
                    user_id,
                    target_id,
                    target_type,
                )
        except DB_ERRORS:
            log_failure(logger, "reminders.remove", user_id=user_id)
            return False
        obs_metrics.inc_reminder_change("remove")
        return True

    async def fetch_user_reminders(self, user_id: str) -> List[models.ReminderWithDetails]:
        """Pending reminders, soonest first, with a summary of their target."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {_REMINDER_COLUMNS}
                    FROM reminders
                    WHERE user_id = $1 AND status = 'pending'
                    ORDER BY reminder_at ASC
                    """,
                    user_id,
                )
                if not rows:
                    return []
                event_ids = [r["target_id"] for r in rows if r["target_type"] == "event"]
                announcement_ids = [r["target_id"] for r in rows if r["target_type"] == "announcement"]
                events = {}
                announcements = {}
                if event_ids:
                    for r in await conn.fetch(
                        "SELECT id, title, start_at, location FROM events WHERE id = ANY($1::uuid[])",
                        event_ids,
                    ):
                        events[str(r["id"])] = from_row(models.ReminderEventDetail, r)
                if announcement_ids:
                    for r in await conn.fetch(
                        "SELECT id, title, deadline FROM announcements WHERE id = ANY($1::uuid[])",
                        announcement_ids,
                    ):
                        announcements[str(r["id"])] = from_row(models.ReminderAnnouncementDetail, r)
        except DB_ERRORS:
            log_failure(logger, "reminders.list", user_id=user_id)
            return []

        result = []
        for r in rows:
            target = str(r["target_id"])
            result.append(
                from_row(
                    models.ReminderWithDetails,
                    r,
                    event=events.get(target) if r["target_type"] == "event" else None,
                    announcement=announcements.get(target) if r["target_type"] == "announcement" else None,
                )
            )
        return result

    async def fetch_reminder_for_target(
        self, user_id: str, target_id: str, target_type: ReminderTargetType
    ) -> Optional[models.Reminder]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {_REMINDER_COLUMNS}
                    FROM reminders
                    WHERE user_id = $1 AND target_id = $2 AND target_type = $3
                    """,
                    user_id,
                    target_id,
                    target_type,
                )
        except DB_ERRORS:
            log_failure(logger, "reminders.get", user_id=user_id)
            return None
        return from_row(models.Reminder, row) if row else None

    async def get_reminder_counts(self) -> models.ReminderCounts:
        """Pending reminder counts per event and per announcement."""
        counts = models.ReminderCounts()
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT target_type, target_id, COUNT(*) AS total
                    FROM reminders
                    WHERE status = 'pending'
                    GROUP BY target_type, target_id
                    """
                )
        except DB_ERRORS:
            log_failure(logger, "reminders.counts")
            return counts
        for r in rows:
            bucket = counts.events if r["target_type"] == "event" else counts.announcements
            if r["target_type"] in ("event", "announcement"):
                bucket[str(r["target_id"])] = int(r["total"])
        return counts

"""Administrative operations over users and the dashboard overview."""

from __future__ import annotations

import asyncio
import logging

import asyncpg

from portal.domain.admin import dashboard
from portal.domain.admin.models import DashboardOverview, UserData
from portal.domain.announcements.service import AnnouncementService
from portal.domain.common.records import log_failure
from portal.domain.events.service import EventService
from portal.domain.profiles.service import ProfileService
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        profiles: ProfileService | None = None,
        events: EventService | None = None,
        announcements: AnnouncementService | None = None,
    ) -> None:
        self.profiles = profiles or ProfileService()
        self.events = events or EventService()
        self.announcements = announcements or AnnouncementService()

    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def remove_user(self, profile_id: str) -> bool:
        """Soft delete: the profile is flagged as removed, never dropped."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute(
                    "UPDATE profiles SET removed = TRUE, updated_at = NOW() WHERE id = $1",
                    profile_id,
                )
        except DB_ERRORS:
            log_failure(logger, "admin.remove_user", profile_id=profile_id)
            return False
        obs_metrics.inc_admin_action("remove_user")
        logger.info("User removed", extra={"profile_id": profile_id})
        return True

    async def refresh_user_data(self) -> UserData:
        profiles, activity = await asyncio.gather(
            self.profiles.get_profiles(),
            self.profiles.get_user_activity(),
        )
        return UserData(profiles=profiles, user_activity=activity)

    async def get_dashboard_overview(self) -> DashboardOverview:
        profiles, alumni, events, announcements = await asyncio.gather(
            self.profiles.get_profiles(),
            self.profiles.get_alumni_profiles(),
            self.events.get_events(),
            self.announcements.get_announcements(),
        )
        return DashboardOverview(
            stats=dashboard.compute_dashboard_stats(profiles, alumni, events, announcements),
            recent_activity=dashboard.recent_activity(alumni, events, announcements),
        )

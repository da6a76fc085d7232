"""Builds the Gawk analytics report for staff and admins."""

from __future__ import annotations

import asyncio
import logging

from portal.domain.gawk import metrics
from portal.domain.gawk.models import GawkReport
from portal.domain.profiles.service import ProfileService
from portal.domain.residency.service import ResidencyService, compute_residency_stats

logger = logging.getLogger(__name__)

SIGN_IN_DAYS = 90


class GawkService:
    def __init__(
        self,
        profiles: ProfileService | None = None,
        residency: ResidencyService | None = None,
    ) -> None:
        self.profiles = profiles or ProfileService()
        self.residency = residency or ResidencyService()

    async def build_report(self) -> GawkReport:
        sign_ins, history, activity, profiles, partners, history_stats = await asyncio.gather(
            self.profiles.get_sign_ins_over_time(SIGN_IN_DAYS),
            self.profiles.get_profile_history(),
            self.profiles.get_user_activity(),
            self.profiles.get_profiles(),
            self.residency.get_residency_partners(),
            self.profiles.get_profile_history_stats(),
        )

        members = [p for p in profiles if p.user_type != "Staff"]
        allowed = {p.id for p in members}
        history = [h for h in history if h.profile_id in allowed]
        activity = [a for a in activity if not (a.profile and a.profile.user_type == "Staff")]
        residency = compute_residency_stats(members, partners)

        logger.info(
            "Gawk report built",
            extra={"profiles": len(members), "history_rows": len(history)},
        )
        return GawkReport(
            total_profiles=len(members),
            total_sign_ins=sum(bucket.count for bucket in sign_ins),
            unique_recent_users=sum(1 for a in activity if a.last_sign_in_at),
            sign_ins=sign_ins,
            recent_history=metrics.recent_history(history),
            residency=residency,
            residency_leaders=residency.partners[: metrics.TOP_N],
            employment_breakdown=metrics.employment_breakdown(members),
            field_changes_by_month=history_stats.changes_by_month,
            field_change_frequency=history_stats.top_changed_fields,
            top_job_titles=metrics.top_job_titles(members),
            location_leaders=metrics.location_leaders(members, history),
            recent_movers=metrics.recent_movers(members, history),
            champion_companies=metrics.champion_companies(members),
            destination_cities=metrics.destination_cities(members, history),
            cohort_breakdown=metrics.cohort_breakdown(members),
            cohort_program_breakdown=metrics.cohort_program_breakdown(members),
            leaderboards=metrics.leaderboards(members, history),
        )

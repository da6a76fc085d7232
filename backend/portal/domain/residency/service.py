"""Service for residency partners and residency statistics."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import asyncpg

from portal.domain.common.records import from_row, log_failure
from portal.domain.common.stats import percent
from portal.domain.profiles.models import Profile
from portal.domain.residency import models
from portal.domain.residency.schemas import ResidencyPartnerCreateRequest, ResidencyPartnerUpdateRequest
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

ELIGIBLE_USER_TYPES = ("Alum", "Admin")

_PARTNER_COLUMNS = "id, name, website, logo_url, description, is_active, created_at, updated_at"
_UPDATABLE = ("name", "website", "logo_url", "description", "is_active")


def match_partner(company: Optional[str], partners: Iterable[models.ResidencyPartner]) -> Optional[models.ResidencyPartner]:
    """First partner whose name contains, or is contained in, the company name."""
    needle = (company or "").strip().lower()
    if not needle:
        return None
    for partner in partners:
        name = (partner.name or "").strip().lower()
        if name and (name in needle or needle in name):
            return partner
    return None


def compute_residency_stats(
    profiles: List[Profile], partners: List[models.ResidencyPartner]
) -> models.ResidencyStats:
    """Share of Alum/Admin profiles working at a residency partner.

    ``total_profiles`` counts every profile passed in, staff included.
    """
    eligible = [p for p in profiles if p.user_type in ELIGIBLE_USER_TYPES]
    matches = [(p, match_partner(p.company, partners)) for p in eligible]
    at_partner = sum(1 for _, partner in matches if partner is not None)

    stats: List[models.PartnerStat] = []
    for partner in partners:
        placed = [p for p, matched in matches if matched is not None and matched.name == partner.name]
        if not placed:
            continue
        msc = sum(1 for p in placed if p.msc)
        stats.append(
            models.PartnerStat(
                name=partner.name,
                count=len(placed),
                bsc_count=len(placed) - msc,
                msc_count=msc,
                percentage=percent(len(placed), len(eligible)),
            )
        )
    stats.sort(key=lambda s: s.count, reverse=True)
    return models.ResidencyStats(
        total_profiles=len(profiles),
        at_residency_partner=at_partner,
        not_at_residency_partner=len(eligible) - at_partner,
        residency_percentage=percent(at_partner, len(eligible)),
        partners=stats,
    )


class ResidencyService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def get_residency_partners(self) -> List[models.ResidencyPartner]:
        """Active partners by name."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT {_PARTNER_COLUMNS} FROM residency_partners WHERE is_active = TRUE ORDER BY name ASC"
                )
        except DB_ERRORS:
            log_failure(logger, "residency.list")
            return []
        return [from_row(models.ResidencyPartner, r) for r in rows]

    async def create_residency_partner(
        self, data: ResidencyPartnerCreateRequest
    ) -> Optional[models.ResidencyPartner]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO residency_partners (name, website, logo_url, description, is_active)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {_PARTNER_COLUMNS}
                    """,
                    data.name,
                    data.website,
                    data.logo_url,
                    data.description,
                    data.is_active,
                )
        except DB_ERRORS:
            log_failure(logger, "residency.create")
            return None
        obs_metrics.inc_content_write("residency_partner", "create")
        return from_row(models.ResidencyPartner, row) if row else None

    async def update_residency_partner(
        self, partner_id: str, data: ResidencyPartnerUpdateRequest
    ) -> Optional[models.ResidencyPartner]:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if k in _UPDATABLE}
        assignments = [f"{column} = ${index}" for index, column in enumerate(changes, start=2)]
        assignments.append("updated_at = NOW()")
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE residency_partners SET {", ".join(assignments)}
                    WHERE id = $1
                    RETURNING {_PARTNER_COLUMNS}
                    """,
                    partner_id,
                    *changes.values(),
                )
        except DB_ERRORS:
            log_failure(logger, "residency.update", partner_id=partner_id)
            return None
        if row is None:
            return None
        obs_metrics.inc_content_write("residency_partner", "update")
        return from_row(models.ResidencyPartner, row)

    async def delete_residency_partner(self, partner_id: str) -> bool:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute("DELETE FROM residency_partners WHERE id = $1", partner_id)
        except DB_ERRORS:
            log_failure(logger, "residency.delete", partner_id=partner_id)
            return False
        obs_metrics.inc_content_write("residency_partner", "delete")
        return True

    async def get_residency_stats(self, profiles: List[Profile]) -> models.ResidencyStats:
        partners = await self.get_residency_partners()
        return compute_residency_stats(profiles, partners)

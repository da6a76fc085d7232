"""Service for the company directory."""

from __future__ import annotations

import logging
from typing import List, Optional

import asyncpg

from portal.domain.common.records import from_row, log_failure
from portal.domain.companies.models import Company
from portal.domain.companies.schemas import CompanyCreateRequest
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

_COMPANY_COLUMNS = "id, name, website, logo_url, description, created_at, updated_at"


class CompanyService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def get_companies(self) -> List[Company]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(f"SELECT {_COMPANY_COLUMNS} FROM companies ORDER BY name ASC")
        except DB_ERRORS:
            log_failure(logger, "companies.list")
            return []
        return [from_row(Company, r) for r in rows]

    async def get_company_by_id(self, company_id: str) -> Optional[Company]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE id = $1", company_id)
        except DB_ERRORS:
            log_failure(logger, "companies.get")
            return None
        return from_row(Company, row) if row else None

    async def create_company(self, data: CompanyCreateRequest) -> Optional[Company]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO companies (name, website, logo_url, description)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {_COMPANY_COLUMNS}
                    """,
                    data.name,
                    data.website,
                    data.logo_url,
                    data.description,
                )
        except DB_ERRORS:
            log_failure(logger, "companies.create")
            return None
        obs_metrics.inc_content_write("company", "create")
        return from_row(Company, row) if row else None

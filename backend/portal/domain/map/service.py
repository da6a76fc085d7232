"""Map data from the database function plus on-demand geocoding."""

from __future__ import annotations

import logging
from typing import List, Literal, Optional

import asyncpg

from portal.domain.common.records import from_row, log_failure
from portal.domain.map import models
from portal.infra import geocoding
from portal.infra.postgres import DB_ERRORS, get_pool

logger = logging.getLogger(__name__)

ViewMode = Literal["current", "overtime"]


class MapService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def _map_rows(self, view_mode: ViewMode) -> list:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            return await conn.fetch("SELECT * FROM rpc_get_map_data($1)", view_mode)

    async def get_map_data_current(self) -> List[models.CurrentMapPoint]:
        try:
            rows = await self._map_rows("current")
        except DB_ERRORS:
            log_failure(logger, "map.current")
            return []
        return [from_row(models.CurrentMapPoint, r) for r in rows]

    async def get_map_data_overtime(self) -> List[models.OvertimeMapTrack]:
        try:
            rows = await self._map_rows("overtime")
        except DB_ERRORS:
            log_failure(logger, "map.overtime")
            return []
        tracks = []
        for r in rows:
            track = from_row(models.OvertimeMapTrack, r)
            if track.timestamps:
                track.timestamps = [t.isoformat() if hasattr(t, "isoformat") else str(t) for t in track.timestamps]
            tracks.append(track)
        return tracks

    async def geocode_location(self, city: Optional[str], country: Optional[str]) -> Optional[geocoding.Coordinates]:
        return await geocoding.geocode(city, country)

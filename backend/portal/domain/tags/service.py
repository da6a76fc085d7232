"""Service for tags and the event/announcement tag relations."""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Sequence

import asyncpg

from portal.domain.common.records import from_row, log_failure
from portal.domain.tags.models import Tag
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

# relation table -> owning entity column
RELATIONS = {
    "event_tags": "event_id",
    "announcement_tags": "announcement_id",
}
Relation = Literal["event_tags", "announcement_tags"]


async def fetch_tags_for(conn, relation: Relation, entity_ids: Sequence[str]) -> Dict[str, List[Tag]]:
    """Tags per entity id; entities without relation rows map to an empty list."""
    column = RELATIONS[relation]
    result: Dict[str, List[Tag]] = {str(entity_id): [] for entity_id in entity_ids}
    if not entity_ids:
        return result
    rows = await conn.fetch(
        f"""
        SELECT r.{column} AS entity_id, t.id, t.name, t.color
        FROM {relation} r
        JOIN tags t ON t.id = r.tag_id
        WHERE r.{column} = ANY($1::uuid[])
        ORDER BY t.name ASC
        """,
        list(entity_ids),
    )
    for r in rows:
        result.setdefault(str(r["entity_id"]), []).append(from_row(Tag, r))
    return result


async def replace_tags(conn, relation: Relation, entity_id: str, tag_ids: Optional[Sequence[str]]) -> None:
    """Swap the relation rows of one entity. Callers hold the transaction."""
    column = RELATIONS[relation]
    await conn.execute(f"DELETE FROM {relation} WHERE {column} = $1", entity_id)
    unique_ids = list(dict.fromkeys(tag_ids or []))
    if unique_ids:
        await conn.executemany(
            f"INSERT INTO {relation} ({column}, tag_id) VALUES ($1, $2)",
            [(entity_id, tag_id) for tag_id in unique_ids],
        )


class TagService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def get_tags(self) -> List[Tag]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch("SELECT id, name, color FROM tags ORDER BY name ASC")
        except DB_ERRORS:
            log_failure(logger, "tags.list")
            return []
        return [from_row(Tag, r) for r in rows]

    async def get_tag_by_id(self, tag_id: str) -> Optional[Tag]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow("SELECT id, name, color FROM tags WHERE id = $1", tag_id)
        except DB_ERRORS:
            log_failure(logger, "tags.get")
            return None
        return from_row(Tag, row) if row else None

    async def create_tag(self, name: str, color: str) -> Optional[Tag]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    "INSERT INTO tags (name, color) VALUES ($1, $2) RETURNING id, name, color",
                    name,
                    color,
                )
        except DB_ERRORS:
            log_failure(logger, "tags.create")
            return None
        obs_metrics.inc_content_write("tag", "create")
        return from_row(Tag, row) if row else None

    async def update_tag(self, tag_id: str, name: str, color: str) -> Optional[Tag]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    "UPDATE tags SET name = $2, color = $3 WHERE id = $1 RETURNING id, name, color",
                    tag_id,
                    name,
                    color,
                )
        except DB_ERRORS:
            log_failure(logger, "tags.update")
            return None
        if row is None:
            return None
        obs_metrics.inc_content_write("tag", "update")
        return from_row(Tag, row)

    async def delete_tag(self, tag_id: str) -> bool:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                await conn.execute("DELETE FROM tags WHERE id = $1", tag_id)
        except DB_ERRORS:
            log_failure(logger, "tags.delete")
            return False
        obs_metrics.inc_content_write("tag", "delete")
        return True

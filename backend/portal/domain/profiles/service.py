"""Service for alumni profiles, sign-in activity and profile history."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

import asyncpg

from portal.domain.common.dates import parse_datetime, utcnow
from portal.domain.common.records import from_row, log_failure
from portal.domain.profiles import models
from portal.domain.profiles.models import PROFILE_COLUMNS
from portal.domain.profiles.schemas import ProfileUpdateRequest
from portal.infra.postgres import DB_ERRORS, get_pool
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

ELIGIBLE_USER_TYPES = ("Alum", "Admin")

_HISTORY_FIELDS = (
    ("job_title", "Job Title"),
    ("company", "Company"),
    ("city", "City"),
    ("country", "Country"),
)


def is_profile_complete(profile: models.Profile) -> bool:
    return bool(profile.full_name and profile.bio and profile.company and profile.job_title)


def get_recent_sign_ins(
    users: Iterable[models.UserActivity], days: int = 7, *, now: Optional[datetime] = None
) -> List[models.UserActivity]:
    cutoff = (now or utcnow()) - timedelta(days=days)
    result = []
    for user in users:
        signed_in = parse_datetime(user.last_sign_in_at)
        if signed_in is not None and signed_in >= cutoff:
            result.append(user)
    return result


def get_inactive_users(
    users: Iterable[models.UserActivity], days: int = 30, *, now: Optional[datetime] = None
) -> List[models.UserActivity]:
    """Users whose last sign-in (or account creation) is older than ``days``."""
    cutoff = (now or utcnow()) - timedelta(days=days)
    result = []
    for user in users:
        seen = parse_datetime(user.last_seen)
        if seen is not None and seen < cutoff:
            result.append(user)
    return result


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def expand_field_changes(
    history: Iterable[models.ProfileHistory], profiles: Iterable[models.Profile]
) -> List[models.FieldChange]:
    """One entry per populated field of each history row, newest first.

    Only Alum and Admin profiles are reported. Old values are not tracked.
    """
    eligible = {p.id: p for p in profiles if p.user_type in ELIGIBLE_USER_TYPES}
    changes: List[models.FieldChange] = []
    for change in history:
        profile = eligible.get(change.profile_id)
        if profile is None:
            continue
        for attr, label in _HISTORY_FIELDS:
            value = getattr(change, attr)
            if not value:
                continue
            changes.append(
                models.FieldChange(
                    id=f"{change.id}_{attr}",
                    user_name=profile.full_name or "Unknown",
                    user_email=profile.email or "Unknown",
                    field_name=label,
                    old_value=None,
                    new_value=value,
                    changed_at=change.changed_at,
                    change_type=change.change_type,
                )
            )
    changes.sort(key=lambda c: _timestamp(c.changed_at), reverse=True)
    return changes


def _timestamp(value) -> float:
    when = parse_datetime(value)
    return when.timestamp() if when else float("-inf")


class ProfileService:
    async def _get_pool(self) -> asyncpg.Pool:
        return await get_pool()

    async def get_profiles(self) -> List[models.Profile]:
        """Public, non-removed profiles ordered by name."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {PROFILE_COLUMNS}
                    FROM profiles
                    WHERE is_public = TRUE AND COALESCE(removed, FALSE) = FALSE
                    ORDER BY full_name ASC
                    """
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.list")
            return []
        return [from_row(models.Profile, r) for r in rows]

    async def get_alumni_profiles(self) -> List[models.Profile]:
        """Public Alum and Admin profiles; staff are left out of the directory."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {PROFILE_COLUMNS}
                    FROM profiles
                    WHERE is_public = TRUE
                        AND COALESCE(removed, FALSE) = FALSE
                        AND user_type = ANY($1::text[])
                    ORDER BY full_name ASC
                    """,
                    list(ELIGIBLE_USER_TYPES),
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.alumni")
            return []
        return [from_row(models.Profile, r) for r in rows]

    async def get_profile_by_user_id(self, user_id: str) -> Optional[models.Profile]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE user_id = $1",
                    user_id,
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.by_user")
            return None
        return from_row(models.Profile, row) if row else None

    async def get_profile_by_id(self, profile_id: str) -> Optional[models.Profile]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE id = $1",
                    profile_id,
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.by_id")
            return None
        return from_row(models.Profile, row) if row else None

    async def update_profile(self, user_id: str, form: ProfileUpdateRequest) -> Optional[models.Profile]:
        """Write the editable profile fields. Blank strings are stored as NULL.

        The avatar is only replaced when a new URL is supplied.
        """
        def blank(value: Optional[str]) -> Optional[str]:
            return value or None

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE profiles SET
                        full_name = $2,
                        city = $3,
                        country = $4,
                        graduation_year = $5,
                        msc = $6,
                        job_title = $7,
                        company = $8,
                        bio = $9,
                        github_url = $10,
                        linkedin_url = $11,
                        twitter_url = $12,
                        website_url = $13,
                        email_visible = $14,
                        is_remote = $15,
                        is_entrepreneur = $16,
                        is_ise_champion = $17,
                        professional_status = $18,
                        avatar_url = COALESCE($19, avatar_url),
                        updated_at = NOW()
                    WHERE user_id = $1
                    RETURNING {PROFILE_COLUMNS}
                    """,
                    user_id,
                    blank(form.full_name),
                    blank(form.city),
                    blank(form.country),
                    form.graduation_year,
                    form.msc,
                    blank(form.job_title),
                    blank(form.company),
                    blank(form.bio),
                    blank(form.github_url),
                    blank(form.linkedin_url),
                    blank(form.twitter_url),
                    blank(form.website_url),
                    form.email_visible,
                    form.is_remote,
                    form.is_entrepreneur,
                    form.is_ise_champion,
                    form.professional_status,
                    blank(form.avatar_url),
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.update", user_id=user_id)
            return None
        if row is None:
            return None
        obs_metrics.inc_profile_update()
        return from_row(models.Profile, row)

    async def search_profiles(self, query: str) -> List[models.Profile]:
        term = (query or "").strip()
        if not term:
            return []
        obs_metrics.inc_search_query()
        pattern = f"%{_escape_like(term)}%"
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {PROFILE_COLUMNS}
                    FROM profiles
                    WHERE is_public = TRUE
                        AND COALESCE(removed, FALSE) = FALSE
                        AND (full_name ILIKE $1 OR bio ILIKE $1 OR company ILIKE $1)
                    ORDER BY full_name ASC
                    """,
                    pattern,
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.search")
            return []
        return [from_row(models.Profile, r) for r in rows]

    async def get_user_activity(self) -> List[models.UserActivity]:
        """Auth users paired with their public profile, most recently seen first."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    "SELECT id, email, last_sign_in_at, created_at FROM auth.users"
                )
        except DB_ERRORS:
            log_failure(logger, "profiles.user_activity")
            return []

        by_user = {p.user_id: p for p in await self.get_profiles()}
        activity = [
            models.UserActivity(
                id=str(r["id"]),
                user_id=str(r["id"]),
                email=r["email"] or "",
                last_sign_in_at=parse_datetime(r["last_sign_in_at"]),
                created_at=parse_datetime(r["created_at"]),
                profile=by_user.get(str(r["id"])),
            )
            for r in rows
        ]
        activity.sort(key=lambda u: _timestamp(u.last_seen), reverse=True)
        return activity

    async def get_profile_history(self, profile_id: Optional[str] = None) -> List[models.ProfileHistory]:
        """History rows in chronological order, optionally for one profile."""
        query = """
            SELECT id, profile_id, job_title, company, city, country, changed_at, change_type
            FROM profiles_history
        """
        args: list = []
        if profile_id:
            query += " WHERE profile_id = $1"
            args.append(profile_id)
        query += " ORDER BY changed_at ASC"
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(query, *args)
        except DB_ERRORS:
            log_failure(logger, "profiles.history")
            return []
        return [from_row(models.ProfileHistory, r) for r in rows]

    async def get_profile_history_stats(self) -> models.ProfileHistoryStats:
        history = await self.get_profile_history()
        profiles = await self.get_profiles()
        eligible = {p.id for p in profiles if p.user_type in ELIGIBLE_USER_TYPES}
        changes = [h for h in history if h.profile_id in eligible]

        by_month: Dict[str, int] = {}
        by_type: Dict[str, int] = {}
        for change in changes:
            when = parse_datetime(change.changed_at)
            if when is not None:
                month = when.strftime("%b %Y")
                by_month[month] = by_month.get(month, 0) + 1
            by_type[change.change_type] = by_type.get(change.change_type, 0) + 1

        fields = Counter(
            {attr: sum(1 for h in changes if getattr(h, attr) is not None) for attr, _ in _HISTORY_FIELDS}
        )
        return models.ProfileHistoryStats(
            total_changes=len(changes),
            changes_by_month=[models.CountBucket(k, v) for k, v in by_month.items()][-12:],
            changes_by_type=[models.CountBucket(k, v) for k, v in by_type.items()],
            top_changed_fields=[models.CountBucket(k, v) for k, v in fields.most_common()],
        )

    async def get_sign_ins_over_time(self, days: int = 30) -> List[models.CountBucket]:
        """Daily counts of profile activity, using ``updated_at`` as the signal.

        Buckets are ISO dates in ascending order; only the last ``days`` are kept.
        """
        buckets: Dict[str, int] = {}
        for profile in await self.get_profiles():
            when = parse_datetime(profile.updated_at)
            if when is None:
                continue
            key = when.date().isoformat()
            buckets[key] = buckets.get(key, 0) + 1
        ordered = sorted(buckets.items())
        return [models.CountBucket(k, v) for k, v in ordered[-days:]] if days > 0 else []

    async def get_field_changes(self, limit: int = 50) -> List[models.FieldChange]:
        return (await self.get_all_field_changes())[:limit]

    async def get_all_field_changes(self) -> List[models.FieldChange]:
        history = await self.get_profile_history()
        profiles = await self.get_profiles()
        return expand_field_changes(history, profiles)

"""Application constants loaded once at startup.

User types and the event tag palette live in the database. They are read into
an immutable ``AppConstants`` during application startup, kept on
``app.state.constants`` and handed to whatever needs them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from portal.infra.postgres import DB_ERRORS
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

ADMIN = "Admin"
STAFF = "Staff"
ALUM = "Alum"

DEFAULT_USER_TYPES: Tuple[str, ...] = (ADMIN, STAFF, ALUM)
DEFAULT_EVENT_TAGS: Tuple[Tuple[str, str], ...] = (
    ("Networking", "#10b981"),
    ("Workshop", "#f59e0b"),
    ("Social", "#ef4444"),
    ("Career", "#8b5cf6"),
    ("Technical", "#06b6d4"),
    ("Online", "#6366f1"),
    ("In-Person", "#f97316"),
)
DEFAULT_TAG_COLOR = "#3b82f6"


@dataclass(frozen=True, slots=True)
class AppConstants:
    user_types: Tuple[str, ...] = DEFAULT_USER_TYPES
    event_tags: Tuple[Tuple[str, str], ...] = DEFAULT_EVENT_TAGS
    _colors: Dict[str, str] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._colors.update(dict(self.event_tags))

    def tag_color(self, name: str) -> Optional[str]:
        return self._colors.get(name)


DEFAULT_CONSTANTS = AppConstants()


async def load_constants(pool) -> AppConstants:
    """Read user types and tags, falling back to defaults per part on failure."""
    user_types: Tuple[str, ...] = DEFAULT_USER_TYPES
    event_tags: Tuple[Tuple[str, str], ...] = DEFAULT_EVENT_TAGS
    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT DISTINCT user_type FROM profiles WHERE user_type IS NOT NULL ORDER BY user_type"
            )
            found = tuple(r["user_type"] for r in rows if r["user_type"])
            if found:
                user_types = found
    except DB_ERRORS:
        logger.exception("Error fetching user types")
        obs_metrics.inc_domain_failure("constants.user_types")
    try:
        async with pool.acquire() as conn:
            rows = await conn.fetch("SELECT name, color FROM tags ORDER BY name")
            event_tags = tuple((r["name"], r["color"]) for r in rows)
    except DB_ERRORS:
        logger.exception("Error fetching event tags")
        obs_metrics.inc_domain_failure("constants.event_tags")
    logger.info("Constants initialised", extra={"user_types": len(user_types), "event_tags": len(event_tags)})
    return AppConstants(user_types=user_types, event_tags=event_tags)


def is_valid_user_type(value: str, constants: AppConstants) -> bool:
    return value in constants.user_types


def is_valid_event_tag(value: str, constants: AppConstants) -> bool:
    return constants.tag_color(value) is not None


def get_event_tag_color(name: str, constants: AppConstants) -> str:
    return constants.tag_color(name) or DEFAULT_TAG_COLOR


def is_admin(user_type: Optional[str]) -> bool:
    return user_type == ADMIN


def is_staff_or_admin(user_type: Optional[str]) -> bool:
    return user_type in (ADMIN, STAFF)


def can_user_create_events(user_type: Optional[str]) -> bool:
    return is_staff_or_admin(user_type)


def can_user_create_announcements(user_type: Optional[str]) -> bool:
    return is_staff_or_admin(user_type)


def can_user_manage(user_type: Optional[str], user_id: str, profile_id: Optional[str], record) -> bool:
    """Admins, the organiser and the creator may edit or delete a record."""
    if is_admin(user_type):
        return True
    organiser = getattr(record, "organiser_profile_id", None)
    created_by = getattr(record, "created_by", None)
    if profile_id and organiser and str(organiser) == str(profile_id):
        return True
    return bool(created_by) and str(created_by) == str(user_id)


def user_type_options(constants: AppConstants) -> List[Dict[str, str]]:
    return [{"value": value, "label": value} for value in constants.user_types]


def event_tag_options(constants: AppConstants) -> List[Dict[str, str]]:
    return [{"value": name, "label": name, "color": color} for name, color in constants.event_tags]

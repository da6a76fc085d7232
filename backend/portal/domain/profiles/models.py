"""Domain models for profiles and their change history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PROFILE_COLUMNS = """
    id, user_id, full_name, email, email_visible, avatar_url, bio, city, country,
    cohort, graduation_year, company, job_title, github_url, linkedin_url,
    twitter_url, website_url, is_public, msc, is_remote, is_entrepreneur,
    is_ise_champion, professional_status, user_type, removed, created_at, updated_at
"""


@dataclass
class Profile:
    id: str
    user_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    email_visible: Optional[bool] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    cohort: Optional[int] = None
    graduation_year: Optional[int] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    website_url: Optional[str] = None
    is_public: Optional[bool] = None
    msc: Optional[bool] = None
    is_remote: Optional[bool] = None
    is_entrepreneur: Optional[bool] = None
    is_ise_champion: Optional[bool] = None
    professional_status: Optional[str] = None  # employed | entrepreneur | open_to_work
    user_type: str = "Alum"
    removed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ProfileHistory:
    id: str
    profile_id: str
    job_title: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    changed_at: Optional[datetime] = None
    change_type: str = "UPDATE"  # INSERT | UPDATE


@dataclass
class UserActivity:
    id: str
    user_id: str
    email: str
    last_sign_in_at: Optional[datetime]
    created_at: Optional[datetime]
    profile: Optional[Profile] = None

    @property
    def last_seen(self) -> Optional[datetime]:
        return self.last_sign_in_at or self.created_at


@dataclass
class FieldChange:
    id: str
    user_name: str
    user_email: str
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    changed_at: Optional[datetime]
    change_type: str


@dataclass
class CountBucket:
    key: str
    count: int


@dataclass
class ProfileHistoryStats:
    total_changes: int
    changes_by_month: list[CountBucket]
    changes_by_type: list[CountBucket]
    top_changed_fields: list[CountBucket]

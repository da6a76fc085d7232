"""Pydantic schemas for the profiles API."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from portal.domain.common.validation import WebUrl

ProfessionalStatus = Literal["employed", "entrepreneur", "open_to_work"]


class ProfileUpdateRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=200)
    city: Optional[str] = None
    country: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, ge=1900, le=2200)
    msc: bool = False
    job_title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=4000)
    github_url: Optional[WebUrl] = None
    linkedin_url: Optional[WebUrl] = None
    twitter_url: Optional[WebUrl] = None
    website_url: Optional[WebUrl] = None
    avatar_url: Optional[WebUrl] = None
    email_visible: bool = False
    is_remote: bool = False
    is_entrepreneur: bool = False
    is_ise_champion: bool = False
    professional_status: Optional[ProfessionalStatus] = None

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return value

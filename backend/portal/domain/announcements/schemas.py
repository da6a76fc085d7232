"""Pydantic schemas for the announcements API."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from portal.domain.common.dates import UtcDatetime
from portal.domain.common.validation import WebUrl

AnnouncementView = Literal["current", "past", "all"]


class AnnouncementWriteRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: Optional[str] = None
    deadline: Optional[UtcDatetime] = None
    external_url: Optional[WebUrl] = None
    image_url: Optional[WebUrl] = None
    organiser_profile_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None

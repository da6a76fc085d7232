"""Pydantic schemas for the events API."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from portal.domain.common.dates import UtcDatetime
from portal.domain.common.validation import WebUrl

EventView = Literal["upcoming", "past", "all"]


class EventWriteRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    location_url: Optional[WebUrl] = None
    registration_url: Optional[WebUrl] = None
    start_at: UtcDatetime
    end_at: Optional[UtcDatetime] = None
    organiser_profile_id: Optional[str] = None
    image_url: Optional[WebUrl] = None
    # None leaves existing relations untouched on update.
    tag_ids: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_window(self) -> "EventWriteRequest":
        if self.end_at is not None and self.end_at < self.start_at:
            raise ValueError("end_at must not be before start_at")
        return self

"""Domain models for events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from portal.domain.tags.models import Tag


@dataclass
class Organiser:
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Event:
    id: str
    title: str
    start_at: datetime
    description: Optional[str] = None
    end_at: Optional[datetime] = None
    location: Optional[str] = None
    location_url: Optional[str] = None
    registration_url: Optional[str] = None
    organiser_profile_id: Optional[str] = None
    created_by: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[Tag] = field(default_factory=list)
    organiser: Optional[Organiser] = None

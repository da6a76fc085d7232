"""Domain models for announcements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from portal.domain.events.models import Organiser
from portal.domain.tags.models import Tag


@dataclass
class Announcement:
    id: str
    title: str
    content: Optional[str] = None  # markdown
    deadline: Optional[datetime] = None
    external_url: Optional[str] = None
    image_url: Optional[str] = None
    organiser_profile_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[Tag] = field(default_factory=list)
    organiser: Optional[Organiser] = None

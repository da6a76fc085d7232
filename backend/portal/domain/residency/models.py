"""Domain models for residency partners and the derived statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class ResidencyPartner:
    id: str
    name: str
    website: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class PartnerStat:
    name: str
    count: int
    bsc_count: int
    msc_count: int
    percentage: int


@dataclass
class ResidencyStats:
    total_profiles: int = 0
    at_residency_partner: int = 0
    not_at_residency_partner: int = 0
    residency_percentage: int = 0
    partners: List[PartnerStat] = field(default_factory=list)

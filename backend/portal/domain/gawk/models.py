"""Report shapes for the Gawk analytics view."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from portal.domain.profiles.models import CountBucket, ProfileHistory
from portal.domain.residency.models import PartnerStat, ResidencyStats


@dataclass
class EmploymentSegment:
    segment: str
    employed: int
    entrepreneur: int
    open: int
    unknown: int
    total: int


@dataclass
class CohortEmployment:
    cohort: str
    employed_rate: int
    entrepreneur_rate: int
    open_rate: int
    total: int


@dataclass
class CohortProgram:
    cohort: str
    bsc_count: int
    msc_count: int
    bsc_rate: int
    msc_rate: int
    total: int


@dataclass
class MoveStep:
    city_label: str
    changed_at: Optional[datetime]


@dataclass
class Mover:
    id: str
    name: str
    path: List[MoveStep]
    city_count: int
    last_changed_at: Optional[datetime]


@dataclass
class LeaderboardEntry:
    id: str
    name: str
    avatar_url: Optional[str]
    count: int


@dataclass
class Leaderboards:
    history_counts: List[LeaderboardEntry] = field(default_factory=list)
    jetsetters: List[LeaderboardEntry] = field(default_factory=list)
    employer_hoppers: List[LeaderboardEntry] = field(default_factory=list)


@dataclass
class GawkReport:
    total_profiles: int
    total_sign_ins: int
    unique_recent_users: int
    sign_ins: List[CountBucket]
    recent_history: List[ProfileHistory]
    residency: ResidencyStats
    residency_leaders: List[PartnerStat]
    employment_breakdown: List[EmploymentSegment]
    field_changes_by_month: List[CountBucket]
    field_change_frequency: List[CountBucket]
    top_job_titles: List[CountBucket]
    location_leaders: List[CountBucket]
    recent_movers: List[Mover]
    champion_companies: List[CountBucket]
    destination_cities: List[CountBucket]
    cohort_breakdown: List[CohortEmployment]
    cohort_program_breakdown: List[CohortProgram]
    leaderboards: Leaderboards

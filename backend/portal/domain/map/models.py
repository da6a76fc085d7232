"""Rows returned by ``rpc_get_map_data``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class CurrentMapPoint:
    profile_id: str
    lat: float
    lng: float
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    company: Optional[str] = None
    graduation_year: Optional[int] = None
    cohort: Optional[str] = None
    msc: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass
class OvertimeMapTrack:
    """Parallel arrays, one entry per recorded location of a profile."""

    profile_id: str
    full_name: Optional[str] = None
    timestamps: Optional[List[str]] = None
    cities: Optional[List[Optional[str]]] = None
    countries: Optional[List[Optional[str]]] = None
    companies: Optional[List[Optional[str]]] = None
    job_titles: Optional[List[Optional[str]]] = None
    lats: Optional[List[float]] = None
    lngs: Optional[List[float]] = None

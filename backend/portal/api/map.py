"""FastAPI routes for the alumni map."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.api.deps import get_current_profile
from portal.domain.map import models, service
from portal.domain.profiles.models import Profile
from portal.infra.geocoding import Coordinates

router = APIRouter(prefix="/map", tags=["map"])

_map_service = service.MapService()


@router.get("/current")
async def current_map_endpoint(_: Profile = Depends(get_current_profile)) -> List[models.CurrentMapPoint]:
    return await _map_service.get_map_data_current()


@router.get("/overtime")
async def overtime_map_endpoint(_: Profile = Depends(get_current_profile)) -> List[models.OvertimeMapTrack]:
    return await _map_service.get_map_data_overtime()


@router.get("/geocode")
async def geocode_endpoint(
    city: Optional[str] = Query(default=None, max_length=120),
    country: Optional[str] = Query(default=None, max_length=120),
    _: Profile = Depends(get_current_profile),
) -> Coordinates:
    if not (city or country):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="location_required")
    coordinates = await _map_service.geocode_location(city, country)
    if coordinates is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="location_not_found")
    return coordinates

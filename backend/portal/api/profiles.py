"""FastAPI routes for the profile directory and the caller's own profile."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.api.deps import get_current_profile
from portal.api.listing import ListingQuery, listing_query, resolve_sort
from portal.domain.common.constants import is_admin
from portal.domain.common.pipeline import DEFAULT_SORT_OPTIONS, PaginatedResult, process_data, PROFILE_SEARCH_FIELDS
from portal.domain.profiles import models, schemas, service

router = APIRouter(prefix="/profiles", tags=["profiles"])

_profile_service = service.ProfileService()

SORTABLE = ("full_name", "cohort", "graduation_year", "company", "city", "country", "created_at", "updated_at")


def _as_seen_by(profile: models.Profile, viewer: models.Profile) -> models.Profile:
    """Hide the email unless it is shared, the viewer owns it or is an admin."""
    if profile.email_visible or profile.user_id == viewer.user_id or is_admin(viewer.user_type):
        return profile
    return replace(profile, email=None)


def _visible(profiles: Iterable[models.Profile], viewer: models.Profile) -> List[models.Profile]:
    return [_as_seen_by(p, viewer) for p in profiles]


def _listing(profiles: List[models.Profile], query: ListingQuery, viewer: models.Profile):
    sort = resolve_sort(query, SORTABLE, DEFAULT_SORT_OPTIONS["profiles"])
    page = process_data(profiles, query.filters, sort, query.pagination, PROFILE_SEARCH_FIELDS)
    page.data = _visible(page.data, viewer)
    return page


@router.get("", response_model=None)
async def list_profiles_endpoint(
    query: ListingQuery = Depends(listing_query),
    viewer: models.Profile = Depends(get_current_profile),
) -> PaginatedResult[models.Profile]:
    return _listing(await _profile_service.get_profiles(), query, viewer)


@router.get("/alumni", response_model=None)
async def list_alumni_endpoint(
    query: ListingQuery = Depends(listing_query),
    viewer: models.Profile = Depends(get_current_profile),
) -> PaginatedResult[models.Profile]:
    return _listing(await _profile_service.get_alumni_profiles(), query, viewer)


@router.get("/search")
async def search_profiles_endpoint(
    q: str = Query(default="", max_length=200),
    viewer: models.Profile = Depends(get_current_profile),
) -> List[models.Profile]:
    return _visible(await _profile_service.search_profiles(q), viewer)


@router.get("/me")
async def get_my_profile_endpoint(
    profile: models.Profile = Depends(get_current_profile),
) -> models.Profile:
    return profile


@router.put("/me")
async def update_my_profile_endpoint(
    payload: schemas.ProfileUpdateRequest,
    profile: models.Profile = Depends(get_current_profile),
) -> models.Profile:
    updated = await _profile_service.update_profile(profile.user_id, payload)
    if updated is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="profile_update_failed")
    return updated


@router.get("/{user_id}")
async def get_profile_endpoint(
    user_id: str,
    viewer: models.Profile = Depends(get_current_profile),
) -> models.Profile:
    profile = await _profile_service.get_profile_by_user_id(user_id)
    if profile is None or profile.removed:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="profile_not_found")
    if not profile.is_public and profile.user_id != viewer.user_id and not is_admin(viewer.user_type):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="profile_not_found")
    return _as_seen_by(profile, viewer)

"""FastAPI routes for announcements."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.api.deps import get_current_profile
from portal.api.listing import ListingQuery, listing_query, resolve_sort
from portal.domain.announcements import models, schemas, service
from portal.domain.announcements.status import is_announcement_expired
from portal.domain.common.constants import can_user_create_announcements, can_user_manage
from portal.domain.common.pipeline import (
    DEFAULT_SORT_OPTIONS,
    PaginatedResult,
    filter_announcements,
    paginate_data,
    sort_announcements,
)
from portal.domain.profiles.models import Profile

router = APIRouter(prefix="/announcements", tags=["announcements"])

_announcement_service = service.AnnouncementService()

SORTABLE = ("created_at", "deadline", "title")


@router.get("", response_model=None)
async def list_announcements_endpoint(
    view: Literal["current", "past", "all"] = Query(default="all"),
    query: ListingQuery = Depends(listing_query),
    _: Profile = Depends(get_current_profile),
) -> PaginatedResult[models.Announcement]:
    announcements = await _announcement_service.get_announcements()
    if view == "current":
        announcements = [a for a in announcements if not is_announcement_expired(a)]
    elif view == "past":
        announcements = [a for a in announcements if is_announcement_expired(a)]
    sort = resolve_sort(query, SORTABLE, DEFAULT_SORT_OPTIONS["announcements"])
    return paginate_data(sort_announcements(filter_announcements(announcements, query.filters), sort), query.pagination)


@router.get("/{announcement_id}")
async def get_announcement_endpoint(
    announcement_id: str, _: Profile = Depends(get_current_profile)
) -> models.Announcement:
    announcement = await _announcement_service.get_announcement(announcement_id)
    if announcement is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="announcement_not_found")
    return announcement


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_announcement_endpoint(
    payload: schemas.AnnouncementWriteRequest,
    profile: Profile = Depends(get_current_profile),
) -> models.Announcement:
    if not can_user_create_announcements(profile.user_type):
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="staff_or_admin_required")
    if payload.organiser_profile_id is None:
        payload.organiser_profile_id = profile.id
    announcement = await _announcement_service.create_announcement(payload, profile.user_id)
    if announcement is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="announcement_create_failed")
    return announcement


async def _managed_announcement(announcement_id: str, profile: Profile) -> models.Announcement:
    announcement = await _announcement_service.get_announcement(announcement_id)
    if announcement is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="announcement_not_found")
    if not can_user_manage(profile.user_type, profile.user_id, profile.id, announcement):
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="not_announcement_owner")
    return announcement


@router.put("/{announcement_id}")
async def update_announcement_endpoint(
    announcement_id: str,
    payload: schemas.AnnouncementWriteRequest,
    profile: Profile = Depends(get_current_profile),
) -> models.Announcement:
    await _managed_announcement(announcement_id, profile)
    announcement = await _announcement_service.update_announcement(announcement_id, payload)
    if announcement is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="announcement_update_failed")
    return announcement


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement_endpoint(
    announcement_id: str, profile: Profile = Depends(get_current_profile)
) -> None:
    await _managed_announcement(announcement_id, profile)
    if not await _announcement_service.delete_announcement(announcement_id):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="announcement_delete_failed")

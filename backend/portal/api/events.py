"""FastAPI routes for events."""

from __future__ import annotations

from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.api.deps import get_current_profile
from portal.api.listing import ListingQuery, listing_query, resolve_sort
from portal.domain.common.constants import can_user_create_events, can_user_manage
from portal.domain.common.pipeline import DEFAULT_SORT_OPTIONS, PaginatedResult, filter_events, paginate_data, sort_events
from portal.domain.events import models, schemas, service
from portal.domain.events.status import is_event_in_past
from portal.domain.profiles.models import Profile
from portal.domain.tags.models import Tag

router = APIRouter(prefix="/events", tags=["events"])

_event_service = service.EventService()

SORTABLE = ("start_at", "end_at", "title", "created_at")


@router.get("", response_model=None)
async def list_events_endpoint(
    view: Literal["upcoming", "past", "all"] = Query(default="all"),
    query: ListingQuery = Depends(listing_query),
    _: Profile = Depends(get_current_profile),
) -> PaginatedResult[models.Event]:
    events = await _event_service.get_events()
    if view == "upcoming":
        events = [e for e in events if not is_event_in_past(e)]
    elif view == "past":
        events = [e for e in events if is_event_in_past(e)]
    sort = resolve_sort(query, SORTABLE, DEFAULT_SORT_OPTIONS["events"])
    return paginate_data(sort_events(filter_events(events, query.filters), sort), query.pagination)


@router.get("/tags")
async def list_event_tags_endpoint(_: Profile = Depends(get_current_profile)) -> List[Tag]:
    return await _event_service.get_tags()


@router.get("/{event_id}")
async def get_event_endpoint(event_id: str, _: Profile = Depends(get_current_profile)) -> models.Event:
    event = await _event_service.get_event(event_id)
    if event is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="event_not_found")
    return event


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: schemas.EventWriteRequest,
    profile: Profile = Depends(get_current_profile),
) -> models.Event:
    if not can_user_create_events(profile.user_type):
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="staff_or_admin_required")
    if payload.organiser_profile_id is None:
        payload.organiser_profile_id = profile.id
    event = await _event_service.create_event(payload, profile.user_id)
    if event is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="event_create_failed")
    return event


async def _managed_event(event_id: str, profile: Profile) -> models.Event:
    event = await _event_service.get_event(event_id)
    if event is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="event_not_found")
    if not can_user_manage(profile.user_type, profile.user_id, profile.id, event):
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="not_event_owner")
    return event


@router.put("/{event_id}")
async def update_event_endpoint(
    event_id: str,
    payload: schemas.EventWriteRequest,
    profile: Profile = Depends(get_current_profile),
) -> models.Event:
    await _managed_event(event_id, profile)
    event = await _event_service.update_event(event_id, payload)
    if event is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="event_update_failed")
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(event_id: str, profile: Profile = Depends(get_current_profile)) -> None:
    await _managed_event(event_id, profile)
    if not await _event_service.delete_event(event_id):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="event_delete_failed")

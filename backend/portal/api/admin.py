"""Admin dashboard routes. Every endpoint requires the Admin user type."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.api.deps import require_admin
from portal.domain.admin import service
from portal.domain.admin.models import DashboardOverview, UserData
from portal.domain.profiles.models import CountBucket, FieldChange, Profile, ProfileHistory, ProfileHistoryStats
from portal.domain.profiles.service import ProfileService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

_admin_service = service.AdminService()
_profile_service = ProfileService()


@router.get("/overview")
async def dashboard_overview_endpoint() -> DashboardOverview:
    return await _admin_service.get_dashboard_overview()


@router.get("/users")
async def user_data_endpoint() -> UserData:
    return await _admin_service.refresh_user_data()


@router.delete("/users/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user_endpoint(profile_id: str, admin: Profile = Depends(require_admin)) -> None:
    if profile_id == admin.id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="cannot_remove_self")
    if await _profile_service.get_profile_by_id(profile_id) is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="profile_not_found")
    if not await _admin_service.remove_user(profile_id):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="user_remove_failed")


@router.get("/history")
async def profile_history_endpoint(profile_id: Optional[str] = Query(default=None)) -> List[ProfileHistory]:
    return await _profile_service.get_profile_history(profile_id)


@router.get("/history/stats")
async def profile_history_stats_endpoint() -> ProfileHistoryStats:
    return await _profile_service.get_profile_history_stats()


@router.get("/sign-ins")
async def sign_ins_endpoint(days: int = Query(default=30, ge=1, le=365)) -> List[CountBucket]:
    return await _profile_service.get_sign_ins_over_time(days)


@router.get("/field-changes")
async def field_changes_endpoint(
    limit: Optional[int] = Query(default=50, ge=1, le=1000),
    include_all: bool = Query(default=False, alias="all"),
) -> List[FieldChange]:
    if include_all:
        return await _profile_service.get_all_field_changes()
    return await _profile_service.get_field_changes(limit)

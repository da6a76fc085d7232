"""Shared dependencies: the caller's profile, role guards and app constants."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from portal.domain.common.constants import DEFAULT_CONSTANTS, AppConstants, is_admin, is_staff_or_admin
from portal.domain.profiles.models import Profile
from portal.domain.profiles.service import ProfileService
from portal.infra.auth import AuthenticatedUser, get_current_user

_profile_service = ProfileService()


async def get_current_profile(
    auth_user: AuthenticatedUser = Depends(get_current_user),
) -> Profile:
    profile = await _profile_service.get_profile_by_user_id(auth_user.id)
    if profile is None or profile.removed:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="profile_not_found")
    return profile


def _require(check: Callable[[str | None], bool], detail: str):
    async def dependency(profile: Profile = Depends(get_current_profile)) -> Profile:
        if not check(profile.user_type):
            raise HTTPException(status.HTTP_403_FORBIDDEN, detail=detail)
        return profile

    return dependency


require_admin = _require(is_admin, "admin_required")
require_staff_or_admin = _require(is_staff_or_admin, "staff_or_admin_required")


def get_constants(request: Request) -> AppConstants:
    return getattr(request.app.state, "constants", None) or DEFAULT_CONSTANTS

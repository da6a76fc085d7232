"""FastAPI routes for the caller's reminders."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from portal.domain.reminders import models, schemas, service
from portal.domain.reminders.schemas import ReminderTargetType
from portal.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/reminders", tags=["reminders"])

_reminder_service = service.ReminderService()


@router.get("")
async def list_reminders_endpoint(
    auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.ReminderWithDetails]:
    return await _reminder_service.fetch_user_reminders(auth_user.id)


@router.get("/counts")
async def reminder_counts_endpoint(
    _: AuthenticatedUser = Depends(get_current_user),
) -> models.ReminderCounts:
    return await _reminder_service.get_reminder_counts()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reminder_endpoint(
    payload: schemas.ReminderCreateRequest,
    auth_user: AuthenticatedUser = Depends(get_current_user),
) -> models.Reminder:
    reminder = await _reminder_service.create_reminder(auth_user.id, payload)
    if reminder is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="reminder_create_failed")
    return reminder


@router.get("/{target_type}/{target_id}")
async def get_reminder_endpoint(
    target_type: ReminderTargetType,
    target_id: str,
    auth_user: AuthenticatedUser = Depends(get_current_user),
) -> models.Reminder:
    reminder = await _reminder_service.fetch_reminder_for_target(auth_user.id, target_id, target_type)
    if reminder is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="reminder_not_found")
    return reminder


@router.delete("/{target_type}/{target_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder_endpoint(
    target_type: ReminderTargetType,
    target_id: str,
    auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
    if not await _reminder_service.remove_reminder(auth_user.id, target_id, target_type):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="reminder_delete_failed")

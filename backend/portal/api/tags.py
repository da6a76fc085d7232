"""FastAPI routes for the shared tag palette."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from portal.api.deps import get_current_profile, require_admin
from portal.domain.profiles.models import Profile
from portal.domain.tags import schemas, service
from portal.domain.tags.models import Tag

router = APIRouter(prefix="/tags", tags=["tags"])

_tag_service = service.TagService()


@router.get("")
async def list_tags_endpoint(_: Profile = Depends(get_current_profile)) -> List[Tag]:
    return await _tag_service.get_tags()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag_endpoint(payload: schemas.TagWriteRequest, _: Profile = Depends(require_admin)) -> Tag:
    tag = await _tag_service.create_tag(payload.name, payload.color)
    if tag is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="tag_create_failed")
    return tag


@router.put("/{tag_id}")
async def update_tag_endpoint(
    tag_id: str, payload: schemas.TagWriteRequest, _: Profile = Depends(require_admin)
) -> Tag:
    if await _tag_service.get_tag_by_id(tag_id) is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="tag_not_found")
    tag = await _tag_service.update_tag(tag_id, payload.name, payload.color)
    if tag is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="tag_update_failed")
    return tag


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag_endpoint(tag_id: str, _: Profile = Depends(require_admin)) -> None:
    if not await _tag_service.delete_tag(tag_id):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="tag_delete_failed")

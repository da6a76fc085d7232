"""FastAPI routes for residency partners and placement statistics."""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from portal.api.deps import get_current_profile, require_admin
from portal.api.listing import ListingQuery, listing_query, resolve_sort
from portal.domain.common.pipeline import (
    PaginatedResult,
    SortOption,
    filter_residency_partners,
    paginate_data,
    sort_data,
)
from portal.domain.profiles.models import Profile
from portal.domain.profiles.service import ProfileService
from portal.domain.residency import logos, models, schemas, service

router = APIRouter(prefix="/residency", tags=["residency"])

_residency_service = service.ResidencyService()
_profile_service = ProfileService()

SORTABLE = ("name", "created_at")
DEFAULT_SORT = SortOption(field="name", direction="asc")


@router.get("/partners", response_model=None)
async def list_partners_endpoint(
    query: ListingQuery = Depends(listing_query),
    _: Profile = Depends(get_current_profile),
) -> PaginatedResult[models.ResidencyPartner]:
    partners = await _residency_service.get_residency_partners()
    sort = resolve_sort(query, SORTABLE, DEFAULT_SORT)
    return paginate_data(sort_data(filter_residency_partners(partners, query.filters), sort), query.pagination)


@router.get("/logos")
async def partner_logos_endpoint(_: Profile = Depends(get_current_profile)) -> Dict[str, Optional[str]]:
    return logos.build_company_logo_map(await _residency_service.get_residency_partners())


@router.get("/stats")
async def residency_stats_endpoint(_: Profile = Depends(get_current_profile)) -> models.ResidencyStats:
    profiles = await _profile_service.get_profiles()
    return await _residency_service.get_residency_stats(profiles)


@router.post("/partners", status_code=status.HTTP_201_CREATED)
async def create_partner_endpoint(
    payload: schemas.ResidencyPartnerCreateRequest, _: Profile = Depends(require_admin)
) -> models.ResidencyPartner:
    partner = await _residency_service.create_residency_partner(payload)
    if partner is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="partner_create_failed")
    return partner


@router.put("/partners/{partner_id}")
async def update_partner_endpoint(
    partner_id: str,
    payload: schemas.ResidencyPartnerUpdateRequest,
    _: Profile = Depends(require_admin),
) -> models.ResidencyPartner:
    partner = await _residency_service.update_residency_partner(partner_id, payload)
    if partner is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="partner_not_found")
    return partner


@router.delete("/partners/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner_endpoint(partner_id: str, _: Profile = Depends(require_admin)) -> None:
    if not await _residency_service.delete_residency_partner(partner_id):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="partner_delete_failed")

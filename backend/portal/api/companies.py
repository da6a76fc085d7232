"""FastAPI routes for the company directory."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from portal.api.deps import get_current_profile, require_staff_or_admin
from portal.domain.companies import schemas, service
from portal.domain.companies.models import Company
from portal.domain.profiles.models import Profile

router = APIRouter(prefix="/companies", tags=["companies"])

_company_service = service.CompanyService()


@router.get("")
async def list_companies_endpoint(_: Profile = Depends(get_current_profile)) -> List[Company]:
    return await _company_service.get_companies()


@router.get("/{company_id}")
async def get_company_endpoint(company_id: str, _: Profile = Depends(get_current_profile)) -> Company:
    company = await _company_service.get_company_by_id(company_id)
    if company is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="company_not_found")
    return company


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_company_endpoint(
    payload: schemas.CompanyCreateRequest, _: Profile = Depends(require_staff_or_admin)
) -> Company:
    company = await _company_service.create_company(payload)
    if company is None:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="company_create_failed")
    return company

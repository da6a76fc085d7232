"""Gawk analytics report, visible to staff and admins."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from portal.api.deps import require_staff_or_admin
from portal.domain.gawk.models import GawkReport
from portal.domain.gawk.service import GawkService

router = APIRouter(prefix="/gawk", tags=["gawk"], dependencies=[Depends(require_staff_or_admin)])

_gawk_service = GawkService()


@router.get("")
async def gawk_report_endpoint() -> GawkReport:
    return await _gawk_service.build_report()

"""Read-only view of the user types and event tags loaded at startup."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends

from portal.api.deps import get_constants
from portal.domain.common.constants import AppConstants, event_tag_options, user_type_options

router = APIRouter(prefix="/constants", tags=["constants"])


@router.get("")
async def constants_endpoint(constants: AppConstants = Depends(get_constants)) -> Dict[str, List[Dict[str, str]]]:
    return {
        "user_types": user_type_options(constants),
        "event_tags": event_tag_options(constants),
    }

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from portal.domain.common.validation import WebUrl


class CompanyCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    website: Optional[WebUrl] = None
    logo_url: Optional[WebUrl] = None
    description: Optional[str] = None

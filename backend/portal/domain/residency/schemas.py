"""Pydantic schemas for the residency API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portal.domain.common.validation import WebUrl


class ResidencyPartnerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    website: Optional[WebUrl] = None
    logo_url: Optional[WebUrl] = None
    description: Optional[str] = None
    is_active: bool = True


class ResidencyPartnerUpdateRequest(BaseModel):
    """Partial update; only the fields sent are written."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    website: Optional[WebUrl] = None
    logo_url: Optional[WebUrl] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    # Omit a field to leave it alone; an explicit null is not a value for these columns.
    @field_validator("name", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

"""Pydantic schemas for the tags API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TagWriteRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$")

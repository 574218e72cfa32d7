"""Schemas for organization and membership endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OrganizationSummary(BaseModel):
    """Compact organization reference embedded in role and report payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str


class OrganizationResponse(BaseModel):
    """An organization node."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: str | None = None
    parent_id: int | None = None
    is_root: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MemberRequest(BaseModel):
    """Body for adding or removing an organization member."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")

"""Schemas for role and chain-of-command endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from titan_orgs.schemas.organizations import OrganizationSummary
from titan_orgs.schemas.profiles import UserProfile


class RoleFields(BaseModel):
    """Editable fields of a role, used for both create and update."""

    user_id: int | None = Field(default=None, alias="userId")
    role: str = Field(..., min_length=1, max_length=255)
    rank: int | None = None

    model_config = ConfigDict(populate_by_name=True)


class ReorderRolesRequest(BaseModel):
    """New ordinal order for every ranked role of an organization."""

    role_ids: list[int] = Field(..., alias="roleIds")

    model_config = ConfigDict(populate_by_name=True)


class RoleResponse(BaseModel):
    """A role with its organization and assignee profile."""

    id: int
    organization_id: int
    user_id: int | None = None
    role: str
    rank: int | None = None
    position: int | None = None
    organization: OrganizationSummary
    user: UserProfile | None = None


class ChainOfCommandResponse(BaseModel):
    """Ordered chain, lowest authority first."""

    organization_id: int
    roles: list[RoleResponse]

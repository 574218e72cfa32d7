"""Role ledger endpoints: listing, parent lookup, create, update and reorder."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from titan_orgs.auth import AuthenticatedUser, get_authenticated_user
from titan_orgs.dependencies import (
    Services,
    get_profile_client,
    get_serializable_services,
    get_services,
    presenter_for,
)
from titan_orgs.schemas.roles import ReorderRolesRequest, RoleFields, RoleResponse
from titan_orgs.services.profiles import ProfileClient
from titan_orgs.services.roles import RolePatch, RoleRankScope

router = APIRouter(prefix="/api/organizations", tags=["roles"])


@router.get("/roles/{role_id}/parent", response_model=Optional[RoleResponse])
def get_parent_role(
    role_id: int,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
) -> RoleResponse | None:
    """The role directly above ``role_id`` in its chain of command, if any."""
    parent = services.ledger.find_parent_role(role_id, include_self_org_only=False)
    if parent is None:
        return None
    return presenter_for(services, profiles).role(parent)


@router.get("/{org_id}/roles", response_model=list[RoleResponse])
def list_organization_roles(
    org_id: int,
    scope: RoleRankScope = Query(default=RoleRankScope.ALL),
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> list[RoleResponse]:
    services.tree.find_by_id(org_id)
    roles = services.ledger.find_org_roles(org_id, scope)
    return presenter_for(services, profiles).roles(roles)


@router.get("/{org_id}/roles/unranked", response_model=list[RoleResponse], deprecated=True)
def get_organization_unranked_roles(
    org_id: int,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
) -> list[RoleResponse]:
    """Unranked roles only. Superseded by ``GET /{org_id}/roles``."""
    services.tree.find_by_id(org_id)
    roles = services.ledger.find_unranked_roles(org_id)
    return presenter_for(services, profiles).roles(roles)


@router.post("/{org_id}/roles:reorder", response_model=None)
def reorder_roles(
    org_id: int,
    request: ReorderRolesRequest,
    services: Services = Depends(get_serializable_services),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> None:
    """Rewrite the ordinal order of an organization's ranked roles.

    Only users seated in the parent organization's chain may reorder.
    """
    services.authorization.ensure_can_reorder_roles(auth_user.user_id, org_id)
    services.ledger.reorder_roles(org_id, request.role_ids)
    services.commit()
    return None


@router.post("/{org_id}/roles", response_model=RoleResponse)
def create_organization_role(
    org_id: int,
    fields: RoleFields,
    services: Services = Depends(get_serializable_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> RoleResponse:
    services.tree.find_by_id(org_id)
    services.authorization.ensure_can_create_role(org_id, fields.user_id)
    role = services.ledger.create_role(
        organization_id=org_id,
        role=fields.role,
        rank=fields.rank,
        user_id=fields.user_id,
    )
    services.commit()
    return presenter_for(services, profiles).role(role)


@router.post("/{org_id}/roles/{role_id}", response_model=RoleResponse)
def update_organization_role(
    org_id: int,
    role_id: int,
    fields: RoleFields,
    services: Services = Depends(get_serializable_services),
    profiles: ProfileClient = Depends(get_profile_client),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
) -> RoleResponse:
    services.authorization.ensure_can_update_role(org_id, fields.user_id)
    role = services.ledger.update_role(
        role_id, org_id, RolePatch(role=fields.role, rank=fields.rank, user_id=fields.user_id)
    )
    services.commit()
    return presenter_for(services, profiles).role(role)

"""Organization tree, membership and chain-of-command endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from titan_orgs.dependencies import Services, get_profile_client, get_services, presenter_for
from titan_orgs.schemas.organizations import MemberRequest, OrganizationResponse
from titan_orgs.schemas.profiles import UserProfile
from titan_orgs.schemas.roles import ChainOfCommandResponse
from titan_orgs.services.profiles import ProfileClient
from titan_orgs.services.roles import MAX_RANK

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.get("", response_model=list[OrganizationResponse])
def list_organizations(services: Services = Depends(get_services)) -> list[OrganizationResponse]:
    """List every organization."""
    return [OrganizationResponse.model_validate(o) for o in services.tree.find_all()]


@router.get("/{key}", response_model=OrganizationResponse)
def get_organization(key: str, services: Services = Depends(get_services)) -> OrganizationResponse:
    """Look an organization up by numeric id, falling back to its slug."""
    org = services.tree.find_by_id(int(key)) if key.isdigit() else services.tree.find_by_slug(key)
    return OrganizationResponse.model_validate(org)


@router.get("/{org_id}/children", response_model=list[OrganizationResponse])
def get_child_organizations(
    org_id: int, services: Services = Depends(get_services)
) -> list[OrganizationResponse]:
    """Direct children of an organization."""
    services.tree.find_by_id(org_id)
    return [OrganizationResponse.model_validate(o) for o in services.tree.find_children(org_id)]


@router.get("/{org_id}/users", response_model=list[UserProfile])
def get_organization_users(
    org_id: int,
    children: bool = Query(default=False),
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
) -> list[UserProfile]:
    """Members of an organization, optionally including every descendant."""
    user_ids = services.membership.find_user_ids(org_id, include_children=children)
    found = profiles.profiles_for(user_ids)
    return [found[uid] for uid in user_ids]


@router.post("/{org_id}/users", response_model=bool)
def add_user(
    org_id: int,
    request: MemberRequest,
    services: Services = Depends(get_services),
) -> bool:
    """Add a member. Re-adding an existing member also answers ``true``."""
    services.membership.add_user(org_id, request.user_id)
    services.commit()
    return True


@router.delete("/{org_id}/users", response_model=bool)
def remove_user(
    org_id: int,
    request: MemberRequest,
    services: Services = Depends(get_services),
) -> bool:
    services.membership.remove_user(org_id, request.user_id)
    services.commit()
    return True


@router.get("/{org_id}/users/{user_id}/coc", response_model=ChainOfCommandResponse)
def get_organization_user_coc(
    org_id: int,
    user_id: int,
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
) -> ChainOfCommandResponse:
    """Chain of command from the user's seat in the organization up to the root."""
    chain = services.resolver.find_user_coc(org_id, user_id)
    return presenter_for(services, profiles).chain(org_id, chain)


@router.get("/{org_id}/coc", response_model=ChainOfCommandResponse)
def get_organization_coc(
    org_id: int,
    max_rank: int = Query(default=MAX_RANK, alias="maxRank"),
    services: Services = Depends(get_services),
    profiles: ProfileClient = Depends(get_profile_client),
) -> ChainOfCommandResponse:
    """Every ranked role standing over the organization."""
    chain = services.resolver.find_org_coc(org_id, max_rank)
    return presenter_for(services, profiles).chain(org_id, chain)

"""Turn ORM rows into response schemas, decorated with user profiles.

Decoration happens after the route has made every authorization decision;
nothing here feeds back into those decisions.
"""

from __future__ import annotations

from collections.abc import Sequence

from titan_orgs.models import OrganizationRole, Report
from titan_orgs.schemas.organizations import OrganizationSummary
from titan_orgs.schemas.reports import ReportResponse
from titan_orgs.schemas.roles import ChainOfCommandResponse, RoleResponse
from titan_orgs.services.chain_of_command import ChainOfCommand
from titan_orgs.services.hierarchy import OrganizationTree
from titan_orgs.services.profiles import ProfileClient
from titan_orgs.services.roles import RoleLedger


class Presenter:
    """Builds responses for one request, caching organization lookups."""

    def __init__(self, tree: OrganizationTree, ledger: RoleLedger, profiles: ProfileClient) -> None:
        self.tree = tree
        self.ledger = ledger
        self.profiles = profiles
        self._orgs: dict[int, OrganizationSummary] = {}

    def _org(self, org_id: int) -> OrganizationSummary:
        if org_id not in self._orgs:
            self._orgs[org_id] = OrganizationSummary.model_validate(self.tree.find_by_id(org_id))
        return self._orgs[org_id]

    def _role(self, role: OrganizationRole, profiles: dict) -> RoleResponse:
        return RoleResponse(
            id=role.id,
            organization_id=role.organization_id,
            user_id=role.user_id,
            role=role.role,
            rank=role.rank,
            position=role.position,
            organization=self._org(role.organization_id),
            user=profiles.get(role.user_id) if role.user_id is not None else None,
        )

    def roles(self, roles: Sequence[OrganizationRole]) -> list[RoleResponse]:
        profiles = self.profiles.profiles_for(r.user_id for r in roles)
        return [self._role(r, profiles) for r in roles]

    def role(self, role: OrganizationRole) -> RoleResponse:
        return self.roles([role])[0]

    def chain(self, org_id: int, chain: ChainOfCommand) -> ChainOfCommandResponse:
        return ChainOfCommandResponse(organization_id=org_id, roles=self.roles(chain.roles))

    def reports(self, reports: Sequence[Report]) -> list[ReportResponse]:
        roles = {r.role_id: self.ledger.find_by_id(r.role_id) for r in reports}
        user_ids = [role.user_id for role in roles.values()] + [r.ack_user_id for r in reports]
        profiles = self.profiles.profiles_for(user_ids)
        return [
            ReportResponse(
                id=r.id,
                role_id=r.role_id,
                state=r.state,
                term_start_date=r.term_start_date,
                submission_date=r.submission_date,
                comments=r.comments,
                ack_user_id=r.ack_user_id,
                ack_date=r.ack_date,
                date_created=r.date_created,
                date_modified=r.date_modified,
                role=self._role(roles[r.role_id], profiles),
                ack_user=profiles.get(r.ack_user_id) if r.ack_user_id is not None else None,
            )
            for r in reports
        ]

    def report(self, report: Report) -> ReportResponse:
        return self.reports([report])[0]

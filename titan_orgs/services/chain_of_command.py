"""Chain-of-Command Resolver.

A chain of command (CoC) is an ordered list of ranked roles, lowest
authority first, ending at the root of the organization forest. Chains
are rebuilt on every call from the current ledger state.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from titan_orgs.errors import HierarchyCorruptionError
from titan_orgs.models import OrganizationRole
from titan_orgs.services.hierarchy import DEFAULT_MAX_DEPTH, OrganizationTree
from titan_orgs.services.roles import MAX_RANK, RoleLedger, RoleRankScope


@dataclass
class ChainOfCommand:
    """Derived, non-persisted chain of ranked roles."""

    roles: list[OrganizationRole] = field(default_factory=list)

    def __iter__(self) -> Iterator[OrganizationRole]:
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.roles)

    @property
    def user_ids(self) -> list[int]:
        return [r.user_id for r in self.roles if r.user_id is not None]

    def role_for_user(self, user_id: int) -> OrganizationRole | None:
        for role in self.roles:
            if role.user_id == user_id:
                return role
        return None


class ChainOfCommandResolver:
    """Walks the Organization Tree and Role Ledger to build chains of command."""

    def __init__(self, session: Session, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.tree = OrganizationTree(session, max_depth=max_depth)
        self.ledger = RoleLedger(session, self.tree)

    def walk_up(self, start: OrganizationRole) -> ChainOfCommand:
        """Follow parent roles from ``start`` until the top of the forest."""
        roles = [start]
        seen = {start.id}
        parent = self.ledger.find_parent_role(start.id)
        while parent is not None:
            if parent.id in seen:
                raise HierarchyCorruptionError(f"Role {parent.id} appears twice in a chain of command")
            seen.add(parent.id)
            roles.append(parent)
            parent = self.ledger.find_parent_role(parent.id)
        return ChainOfCommand(roles)

    def find_user_coc(self, org_id: int, user_id: int) -> ChainOfCommand:
        """Chain from the user's ranked role in ``org_id`` up to the root.

        Users without a ranked role in the organization get the chain that
        starts at the organization's top role (or, for an organization with
        no ranked roles, at the nearest ancestor's top role).
        """
        self.tree.find_by_id(org_id)
        start = self.ledger.find_org_role_by_user_id(org_id, user_id, ranked_only=True)
        if start is None:
            start = self.ledger.find_top_role(org_id)
        if start is None:
            for ancestor in self.tree.find_ancestors(org_id):
                start = self.ledger.find_top_role(ancestor.id)
                if start is not None:
                    break
        if start is None:
            return ChainOfCommand()
        return self.walk_up(start)

    def find_org_coc(self, org_id: int, max_rank: int = MAX_RANK) -> ChainOfCommand:
        """Every ranked role that stands over ``org_id``.

        The organization's own roles come first, limited to ranks at or
        above ``max_rank`` in authority, followed by all ranked roles of
        each ancestor, nearest ancestor first. Each block runs from lowest
        to highest authority.
        """
        self.tree.find_by_id(org_id)
        own = [
            r
            for r in self.ledger.find_org_roles(org_id, RoleRankScope.RANKED)
            if r.rank <= max_rank
        ]
        roles = list(reversed(own))
        for ancestor in self.tree.find_ancestors(org_id):
            roles.extend(reversed(self.ledger.find_org_roles(ancestor.id, RoleRankScope.RANKED)))
        return ChainOfCommand(roles)

    def is_user_in_parent_coc(self, user_id: int, org_id: int) -> bool:
        """True when the user holds a ranked role above ``org_id``'s own roles."""
        org = self.tree.find_by_id(org_id)
        if org.parent_id is None:
            return False
        return self.find_org_coc(org.parent_id).role_for_user(user_id) is not None

    def is_user_in_coc(self, user_id: int, org_id: int) -> bool:
        return self.find_role_in_coc(user_id, org_id) is not None

    def find_role_in_coc(self, user_id: int, org_id: int) -> OrganizationRole | None:
        return self.find_org_coc(org_id).role_for_user(user_id)

    def find_direct_reports(self, org_id: int, rank: int) -> list[OrganizationRole]:
        """Direct reports of the first role, in order, holding ``rank`` in ``org_id``."""
        target = self.ledger.find_role_at_rank(org_id, rank)
        if target is None:
            return []
        return self.find_direct_reports_of(target)

    def find_direct_reports_of(self, target: OrganizationRole) -> list[OrganizationRole]:
        """Ranked roles whose resolved parent is ``target``.

        Candidates are the other ranked roles of ``target``'s organization,
        then every ranked role of each descendant organization in
        breadth-first order. Roles sharing a rank are checked individually.
        """
        candidates = [
            r
            for r in self.ledger.find_org_roles(target.organization_id, RoleRankScope.RANKED)
            if r.id != target.id
        ]
        for descendant in self.tree.find_descendants(target.organization_id):
            candidates.extend(self.ledger.find_org_roles(descendant.id, RoleRankScope.RANKED))

        reports = []
        for candidate in candidates:
            parent = self.ledger.find_parent_role(candidate.id)
            if parent is not None and parent.id == target.id:
                reports.append(candidate)
        return reports

"""Role Ledger — ranked roles scoped to an organization.

Ranks follow a "lower number, higher authority" convention. That
convention is expressed once, in ``outranks`` and ``role_order_key``, and
everything else (ordering, parent resolution, report scoping) goes
through those two functions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from titan_orgs.errors import NotFoundError, ValidationError
from titan_orgs.models import OrganizationRole
from titan_orgs.services.hierarchy import OrganizationTree

logger = structlog.get_logger()

MAX_RANK = 2**31 - 1
ASSIGNEE_IN_COC = "Assignee is already in CoC"


class RoleRankScope(str, enum.Enum):
    """Which roles of an organization a listing covers."""

    ALL = "all"
    RANKED = "ranked"


def outranks(rank_a: int, rank_b: int) -> bool:
    """True when ``rank_a`` carries strictly more authority than ``rank_b``."""
    return rank_a < rank_b


def role_order_key(role: OrganizationRole) -> tuple[int, int, int]:
    """Sort key for ranked roles: authority first, then ordinal, then id."""
    position = role.position if role.position is not None else MAX_RANK
    return (role.rank if role.rank is not None else MAX_RANK, position, role.id)


@dataclass
class RolePatch:
    """Full replacement of a role's editable fields."""

    role: str
    rank: int | None = None
    user_id: int | None = None


class RoleLedger:
    """Queries and mutations over ``OrganizationRole`` rows."""

    def __init__(self, session: Session, tree: OrganizationTree) -> None:
        self.session = session
        self.tree = tree

    # ─── Queries ─────────────────────────────────────────────────────────

    def find_by_id(self, role_id: int) -> OrganizationRole:
        role = self.session.get(OrganizationRole, role_id)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    def find_org_roles(
        self, org_id: int, scope: RoleRankScope = RoleRankScope.ALL
    ) -> list[OrganizationRole]:
        """Roles of one organization, highest authority first.

        With ``RoleRankScope.ALL`` the unranked roles follow the ranked ones
        in creation order.
        """
        roles = list(
            self.session.execute(
                select(OrganizationRole).where(OrganizationRole.organization_id == org_id)
            ).scalars()
        )
        ranked = sorted((r for r in roles if r.is_ranked), key=role_order_key)
        if scope == RoleRankScope.RANKED:
            return ranked
        unranked = sorted((r for r in roles if not r.is_ranked), key=lambda r: r.id)
        return ranked + unranked

    def find_unranked_roles(self, org_id: int) -> list[OrganizationRole]:
        return list(
            self.session.execute(
                select(OrganizationRole)
                .where(
                    OrganizationRole.organization_id == org_id,
                    OrganizationRole.rank.is_(None),
                )
                .order_by(OrganizationRole.id)
            ).scalars()
        )

    def find_top_role(self, org_id: int) -> OrganizationRole | None:
        ranked = self.find_org_roles(org_id, RoleRankScope.RANKED)
        return ranked[0] if ranked else None

    def find_role_at_rank(self, org_id: int, rank: int) -> OrganizationRole | None:
        """First role, in order, holding exactly ``rank`` in the organization."""
        for role in self.find_org_roles(org_id, RoleRankScope.RANKED):
            if role.rank == rank:
                return role
        return None

    def find_ranked_by_user_id(self, user_id: int) -> list[OrganizationRole]:
        """Every ranked role the user holds, across organizations."""
        roles = self.session.execute(
            select(OrganizationRole).where(
                OrganizationRole.user_id == user_id,
                OrganizationRole.rank.is_not(None),
            )
        ).scalars()
        return sorted(roles, key=lambda r: (r.organization_id, role_order_key(r)))

    def find_org_role_by_user_id(
        self, org_id: int, user_id: int, ranked_only: bool = False
    ) -> OrganizationRole | None:
        stmt = select(OrganizationRole).where(
            OrganizationRole.organization_id == org_id,
            OrganizationRole.user_id == user_id,
        )
        if ranked_only:
            stmt = stmt.where(OrganizationRole.rank.is_not(None))
        return self.session.execute(stmt).scalars().first()

    def find_parent_role(
        self, role_id: int, include_self_org_only: bool = False
    ) -> OrganizationRole | None:
        """Return the role directly above ``role_id`` in the chain of command.

        Within the role's organization this is the last role, in order,
        whose rank strictly outranks the role's own rank; peers sharing the
        rank are never parents. When the organization has no such role the
        search moves to the nearest ancestor organization with ranked roles
        and returns its top role, unless ``include_self_org_only`` is set.

        Unranked roles sit outside the chain and have no parent.
        """
        role = self.find_by_id(role_id)
        if role.rank is None:
            return None

        superiors = [
            r
            for r in self.find_org_roles(role.organization_id, RoleRankScope.RANKED)
            if outranks(r.rank, role.rank)
        ]
        if superiors:
            return superiors[-1]
        if include_self_org_only:
            return None

        for ancestor in self.tree.find_ancestors(role.organization_id):
            top = self.find_top_role(ancestor.id)
            if top is not None:
                return top
        return None

    # ─── Mutations ───────────────────────────────────────────────────────

    def create_role(
        self,
        organization_id: int,
        role: str,
        rank: int | None = None,
        user_id: int | None = None,
    ) -> OrganizationRole:
        """Insert a role; ranked roles are appended after the existing order."""
        self.tree.find_by_id(organization_id)
        new_role = OrganizationRole(
            organization_id=organization_id,
            role=role,
            rank=rank,
            user_id=user_id,
            position=self._next_position(organization_id) if rank is not None else None,
        )
        self.session.add(new_role)
        self._flush_assignment()
        logger.info(
            "role_created",
            role_id=new_role.id,
            org_id=organization_id,
            rank=rank,
            user_id=user_id,
        )
        return new_role

    def update_role(self, role_id: int, org_id: int, patch: RolePatch) -> OrganizationRole:
        role = self.session.get(OrganizationRole, role_id)
        if role is None or role.organization_id != org_id:
            raise NotFoundError(f"Role {role_id} not found in organization {org_id}")

        if patch.rank is None:
            role.position = None
        elif role.rank is None:
            role.position = self._next_position(org_id)
        role.rank = patch.rank
        role.role = patch.role
        role.user_id = patch.user_id
        self._flush_assignment()
        logger.info("role_updated", role_id=role_id, org_id=org_id, rank=patch.rank, user_id=patch.user_id)
        return role

    def reorder_roles(self, org_id: int, ordered_role_ids: list[int]) -> None:
        """Rewrite ordinal positions to follow ``ordered_role_ids``.

        The list must name every ranked role of the organization exactly
        once. Validation happens before any row is touched, and the caller's
        transaction scope commits the new positions together.
        """
        ranked = {r.id: r for r in self.find_org_roles(org_id, RoleRankScope.RANKED)}
        if len(ordered_role_ids) != len(set(ordered_role_ids)):
            raise ValidationError("Role ids must not repeat")
        if set(ordered_role_ids) != set(ranked):
            missing = sorted(set(ranked) - set(ordered_role_ids))
            extra = sorted(set(ordered_role_ids) - set(ranked))
            raise ValidationError(
                f"Role ids must match the ranked roles of organization {org_id} "
                f"(missing={missing}, unexpected={extra})"
            )

        for position, role_id in enumerate(ordered_role_ids):
            ranked[role_id].position = position
        self.session.flush()
        logger.info("roles_reordered", org_id=org_id, role_ids=ordered_role_ids)

    def _next_position(self, org_id: int) -> int:
        positions = [
            r.position
            for r in self.find_org_roles(org_id, RoleRankScope.RANKED)
            if r.position is not None
        ]
        return max(positions) + 1 if positions else 0

    def _flush_assignment(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            logger.warning("role_assignment_rejected", error=str(exc.orig))
            raise ValidationError(ASSIGNEE_IN_COC) from exc

"""Organization membership — the set of users attached to each organization."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from titan_orgs.models import OrganizationUser
from titan_orgs.services.hierarchy import OrganizationTree

logger = structlog.get_logger()


class MembershipService:
    """Idempotent add/remove and listing of organization members."""

    def __init__(self, session: Session, tree: OrganizationTree) -> None:
        self.session = session
        self.tree = tree

    def is_member(self, org_id: int, user_id: int) -> bool:
        return self.session.get(OrganizationUser, (org_id, user_id)) is not None

    def add_user(self, org_id: int, user_id: int) -> OrganizationUser:
        """Add a member. Adding an existing pair is a successful no-op."""
        self.tree.find_by_id(org_id)
        existing = self.session.get(OrganizationUser, (org_id, user_id))
        if existing is not None:
            return existing
        membership = OrganizationUser(organization_id=org_id, user_id=user_id)
        self.session.add(membership)
        self.session.flush()
        logger.info("member_added", org_id=org_id, user_id=user_id)
        return membership

    def remove_user(self, org_id: int, user_id: int) -> bool:
        """Remove a member; returns False when there was nothing to remove."""
        membership = self.session.get(OrganizationUser, (org_id, user_id))
        if membership is None:
            return False
        self.session.delete(membership)
        self.session.flush()
        logger.info("member_removed", org_id=org_id, user_id=user_id)
        return True

    def find_user_ids(self, org_id: int, include_children: bool = False) -> list[int]:
        """Member ids of ``org_id`` (and its descendants), ascending, unique."""
        org_ids = [self.tree.find_by_id(org_id).id]
        if include_children:
            org_ids.extend(o.id for o in self.tree.find_descendants(org_id))
        user_ids = self.session.execute(
            select(OrganizationUser.user_id)
            .where(OrganizationUser.organization_id.in_(org_ids))
            .distinct()
        ).scalars()
        return sorted(user_ids)

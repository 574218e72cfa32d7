"""Organization Tree — read access to the organization forest.

Organizations are looked up by identifier; parent/child relations are
followed one identifier lookup per hop. The forest invariant is owned by
whatever edits parent links, so every walk here is bounded and reports a
cycle, a dangling parent or an over-deep tree as ``HierarchyCorruptionError``.
"""

from __future__ import annotations

from collections import deque

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from titan_orgs.errors import HierarchyCorruptionError, NotFoundError
from titan_orgs.models import Organization

logger = structlog.get_logger()

DEFAULT_MAX_DEPTH = 64


class OrganizationTree:
    """Ancestor, descendant and child queries over organizations."""

    def __init__(self, session: Session, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.session = session
        self.max_depth = max_depth

    def find_by_id(self, org_id: int) -> Organization:
        org = self.session.get(Organization, org_id)
        if org is None:
            raise NotFoundError(f"Organization {org_id} not found")
        return org

    def find_by_slug(self, slug: str) -> Organization:
        org = self.session.execute(
            select(Organization).where(Organization.slug == slug)
        ).scalar_one_or_none()
        if org is None:
            raise NotFoundError(f"Organization '{slug}' not found")
        return org

    def find_children(self, org_id: int) -> list[Organization]:
        """Direct children only, in creation order."""
        return list(
            self.session.execute(
                select(Organization)
                .where(Organization.parent_id == org_id)
                .order_by(Organization.id)
            ).scalars()
        )

    def find_all(self) -> list[Organization]:
        return list(self.session.execute(select(Organization).order_by(Organization.id)).scalars())

    def find_parent(self, org: Organization) -> Organization | None:
        """Return the parent of ``org``, or None for a root."""
        if org.parent_id is None:
            return None
        parent = self.session.get(Organization, org.parent_id)
        if parent is None:
            self._corrupt(org.id, f"Organization {org.id} references missing parent {org.parent_id}")
        return parent

    def find_ancestors(self, org_id: int) -> list[Organization]:
        """Walk upward from ``org_id``; the parent comes first, the root last."""
        org = self.find_by_id(org_id)
        ancestors: list[Organization] = []
        seen = {org.id}
        parent = self.find_parent(org)
        while parent is not None:
            if parent.id in seen:
                self._corrupt(org_id, f"Cycle detected above organization {org_id}")
            if len(ancestors) >= self.max_depth:
                self._corrupt(org_id, f"Hierarchy above organization {org_id} exceeds {self.max_depth} levels")
            seen.add(parent.id)
            ancestors.append(parent)
            parent = self.find_parent(parent)
        return ancestors

    def find_descendants(self, org_id: int) -> list[Organization]:
        """Breadth-first list of every organization below ``org_id``."""
        self.find_by_id(org_id)
        descendants: list[Organization] = []
        seen = {org_id}
        queue: deque[tuple[int, int]] = deque([(org_id, 0)])
        while queue:
            current_id, depth = queue.popleft()
            for child in self.find_children(current_id):
                if child.id in seen:
                    self._corrupt(org_id, f"Cycle detected below organization {org_id}")
                if depth + 1 > self.max_depth:
                    self._corrupt(org_id, f"Hierarchy below organization {org_id} exceeds {self.max_depth} levels")
                seen.add(child.id)
                descendants.append(child)
                queue.append((child.id, depth + 1))
        return descendants

    def _corrupt(self, org_id: int, message: str) -> None:
        logger.error("hierarchy_corruption_detected", org_id=org_id, reason=message)
        raise HierarchyCorruptionError(message)

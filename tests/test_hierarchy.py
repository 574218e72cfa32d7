"""Tests for the Organization Tree and organization membership.

Covers: id/slug lookups, child and ancestor walks, breadth-first descendants,
bounded traversal over corrupt hierarchies, and idempotent membership.
"""

from __future__ import annotations

import pytest

from titan_orgs.errors import HierarchyCorruptionError, NotFoundError
from titan_orgs.models import Organization, OrganizationUser
from titan_orgs.services.hierarchy import OrganizationTree
from titan_orgs.services.membership import MembershipService


# ─── Test 1: Lookups ─────────────────────────────────────────────────────────

class TestLookups:
    """Finding organizations by id and slug."""

    def test_find_by_id(self, session, hierarchy):
        org = OrganizationTree(session).find_by_id(hierarchy.bn)
        assert org.slug == "bn"
        assert org.parent_id == hierarchy.root

    def test_find_by_slug(self, session, hierarchy):
        org = OrganizationTree(session).find_by_slug("co")
        assert org.id == hierarchy.co

    def test_unknown_id_is_not_found(self, session, hierarchy):
        with pytest.raises(NotFoundError):
            OrganizationTree(session).find_by_id(9999)

    def test_unknown_slug_is_not_found(self, session, hierarchy):
        with pytest.raises(NotFoundError):
            OrganizationTree(session).find_by_slug("nope")

    def test_find_all_in_creation_order(self, session, hierarchy):
        slugs = [o.slug for o in OrganizationTree(session).find_all()]
        assert slugs == ["unkso", "bn", "co", "other", "staff", "det"]

    def test_roots_have_no_parent(self, session, hierarchy):
        tree = OrganizationTree(session)
        assert tree.find_by_id(hierarchy.root).is_root
        assert tree.find_by_id(hierarchy.other).is_root
        assert not tree.find_by_id(hierarchy.co).is_root


# ─── Test 2: Walking the tree ────────────────────────────────────────────────

class TestTraversal:
    """Children, ancestors and descendants."""

    def test_children_are_direct_only(self, session, hierarchy):
        children = OrganizationTree(session).find_children(hierarchy.bn)
        assert [c.id for c in children] == [hierarchy.co, hierarchy.staff]

    def test_leaf_has_no_children(self, session, hierarchy):
        assert OrganizationTree(session).find_children(hierarchy.co) == []

    def test_ancestors_parent_first(self, session, hierarchy):
        ancestors = OrganizationTree(session).find_ancestors(hierarchy.det)
        assert [a.id for a in ancestors] == [hierarchy.staff, hierarchy.bn, hierarchy.root]

    def test_root_has_no_ancestors(self, session, hierarchy):
        assert OrganizationTree(session).find_ancestors(hierarchy.root) == []

    def test_descendants_breadth_first(self, session, hierarchy):
        descendants = OrganizationTree(session).find_descendants(hierarchy.root)
        assert [d.id for d in descendants] == [
            hierarchy.bn, hierarchy.co, hierarchy.staff, hierarchy.det,
        ]

    def test_separate_roots_do_not_mix(self, session, hierarchy):
        tree = OrganizationTree(session)
        assert tree.find_descendants(hierarchy.other) == []
        assert hierarchy.other not in [d.id for d in tree.find_descendants(hierarchy.root)]


# ─── Test 3: Corrupt hierarchies ─────────────────────────────────────────────

class TestCorruption:
    """Traversal is bounded and reports corruption instead of looping."""

    def test_cycle_detected_walking_up(self, session):
        a = Organization(slug="a", name="A")
        session.add(a)
        session.flush()
        b = Organization(slug="b", name="B", parent_id=a.id)
        session.add(b)
        session.flush()
        a.parent_id = b.id
        session.flush()

        with pytest.raises(HierarchyCorruptionError):
            OrganizationTree(session).find_ancestors(a.id)

    def test_cycle_detected_walking_down(self, session):
        a = Organization(slug="a", name="A")
        session.add(a)
        session.flush()
        b = Organization(slug="b", name="B", parent_id=a.id)
        session.add(b)
        session.flush()
        a.parent_id = b.id
        session.flush()

        with pytest.raises(HierarchyCorruptionError):
            OrganizationTree(session).find_descendants(a.id)

    def test_depth_bound_enforced(self, session, hierarchy):
        tree = OrganizationTree(session, max_depth=2)
        assert len(tree.find_ancestors(hierarchy.co)) == 2
        with pytest.raises(HierarchyCorruptionError):
            tree.find_ancestors(hierarchy.det)

    def test_dangling_parent_detected(self, session):
        orphan = Organization(slug="orphan", name="Orphan", parent_id=424242)
        session.add(orphan)
        session.flush()
        with pytest.raises(HierarchyCorruptionError):
            OrganizationTree(session).find_ancestors(orphan.id)


# ─── Test 4: Membership ──────────────────────────────────────────────────────

class TestMembership:
    """Membership is a set of (organization, user) pairs."""

    def test_add_is_idempotent(self, session, hierarchy):
        members = MembershipService(session, OrganizationTree(session))
        members.add_user(hierarchy.bn, 42)
        members.add_user(hierarchy.bn, 42)

        rows = session.query(OrganizationUser).filter_by(organization_id=hierarchy.bn, user_id=42).all()
        assert len(rows) == 1
        assert members.is_member(hierarchy.bn, 42)

    def test_add_to_unknown_org_fails(self, session, hierarchy):
        members = MembershipService(session, OrganizationTree(session))
        with pytest.raises(NotFoundError):
            members.add_user(9999, 42)

    def test_remove(self, session, hierarchy):
        members = MembershipService(session, OrganizationTree(session))
        members.add_user(hierarchy.co, 42)
        assert members.remove_user(hierarchy.co, 42) is True
        assert members.remove_user(hierarchy.co, 42) is False
        assert not members.is_member(hierarchy.co, 42)

    def test_find_user_ids_with_children(self, session, hierarchy):
        members = MembershipService(session, OrganizationTree(session))
        members.add_user(hierarchy.bn, 30)
        members.add_user(hierarchy.co, 31)
        members.add_user(hierarchy.det, 32)
        members.add_user(hierarchy.det, 30)

        assert members.find_user_ids(hierarchy.bn) == [30]
        assert members.find_user_ids(hierarchy.bn, include_children=True) == [30, 31, 32]

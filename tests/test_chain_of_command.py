"""Tests for the Chain-of-Command Resolver.

Covers: user chains, organization chains with a rank ceiling, parent-chain
membership, direct reports, and corruption detection while walking up.
"""

from __future__ import annotations

import pytest

from titan_orgs.errors import HierarchyCorruptionError, NotFoundError
from titan_orgs.services.chain_of_command import ChainOfCommand, ChainOfCommandResolver


def _ids(chain) -> list[int]:
    return [r.id for r in chain]


# ─── Test 1: User chains ─────────────────────────────────────────────────────

class TestUserChain:
    """Chains starting at a user's seat."""

    def test_from_users_own_seat(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_user_coc(hierarchy.co, 7)
        h = hierarchy
        assert _ids(chain) == [h.c2, h.c1, h.b1, h.r1]

    def test_lowest_ranked_battalion_member(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_user_coc(hierarchy.bn, 5)
        h = hierarchy
        assert _ids(chain) == [h.b3, h.b2, h.b1, h.r1]

    def test_outsider_starts_at_top_role(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_user_coc(hierarchy.co, 99)
        h = hierarchy
        assert _ids(chain) == [h.c1, h.b1, h.r1]

    def test_org_without_roles_uses_nearest_ancestor(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_user_coc(hierarchy.staff, 99)
        assert _ids(chain) == [hierarchy.b1, hierarchy.r1]

    def test_unranked_seat_is_ignored(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_user_coc(hierarchy.root, 9)
        assert _ids(chain) == [hierarchy.r1]

    def test_chain_ends_at_a_role_without_parent(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session)
        chain = resolver.find_user_coc(hierarchy.det, 10)
        assert resolver.ledger.find_parent_role(chain.roles[-1].id) is None

    def test_user_ids_skip_vacancies(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session)
        resolver.ledger.create_role(hierarchy.other, "Deputy", rank=2)
        chain = resolver.find_user_coc(hierarchy.other, 99)
        assert chain.user_ids == [8]
        chain = resolver.find_org_coc(hierarchy.other)
        assert len(chain) == 2
        assert chain.user_ids == [8]

    def test_unknown_org(self, session, hierarchy):
        with pytest.raises(NotFoundError):
            ChainOfCommandResolver(session).find_user_coc(9999, 1)


# ─── Test 2: Organization chains ─────────────────────────────────────────────

class TestOrganizationChain:
    """Every ranked role standing over an organization."""

    def test_battalion(self, session, hierarchy):
        h = hierarchy
        chain = ChainOfCommandResolver(session).find_org_coc(h.bn)
        assert _ids(chain) == [h.b3, h.b2, h.b1, h.r2, h.r1]

    def test_rank_ceiling_applies_to_own_roles_only(self, session, hierarchy):
        h = hierarchy
        chain = ChainOfCommandResolver(session).find_org_coc(h.bn, max_rank=2)
        assert _ids(chain) == [h.b2, h.b1, h.r2, h.r1]

    def test_company(self, session, hierarchy):
        h = hierarchy
        chain = ChainOfCommandResolver(session).find_org_coc(h.co)
        assert _ids(chain) == [h.c2, h.c1, h.b3, h.b2, h.b1, h.r2, h.r1]

    def test_unranked_roles_never_appear(self, session, hierarchy):
        chain = ChainOfCommandResolver(session).find_org_coc(hierarchy.root)
        assert hierarchy.clerk not in _ids(chain)

    def test_empty_chain(self, session):
        chain = ChainOfCommand()
        assert len(chain) == 0
        assert chain.role_for_user(1) is None


# ─── Test 3: Membership in chains ────────────────────────────────────────────

class TestChainMembership:
    """Whether a user sits in a chain."""

    @pytest.mark.parametrize(
        "user_id, org, expected",
        [
            (2, "bn", True),
            (4, "bn", False),
            (4, "co", True),
            (1, "root", False),
            (8, "co", False),
        ],
    )
    def test_in_parent_chain(self, session, hierarchy, user_id, org, expected):
        resolver = ChainOfCommandResolver(session)
        assert resolver.is_user_in_parent_coc(user_id, getattr(hierarchy, org)) is expected

    def test_in_own_chain(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session)
        assert resolver.is_user_in_coc(7, hierarchy.co)
        assert resolver.is_user_in_coc(1, hierarchy.co)
        assert not resolver.is_user_in_coc(9, hierarchy.root)

    def test_role_in_chain(self, session, hierarchy):
        role = ChainOfCommandResolver(session).find_role_in_coc(3, hierarchy.co)
        assert role.id == hierarchy.b1


# ─── Test 4: Direct reports ──────────────────────────────────────────────────

class TestDirectReports:
    """Roles whose parent is a given seat."""

    def test_battalion_commander(self, session, hierarchy):
        h = hierarchy
        reports = ChainOfCommandResolver(session).find_direct_reports(h.bn, 1)
        assert _ids(reports) == [h.b2, h.c1, h.d1]

    def test_top_of_forest(self, session, hierarchy):
        h = hierarchy
        reports = ChainOfCommandResolver(session).find_direct_reports(h.root, 1)
        assert _ids(reports) == [h.r2, h.b1]

    def test_missing_rank(self, session, hierarchy):
        assert ChainOfCommandResolver(session).find_direct_reports(hierarchy.root, 5) == []

    def test_tied_top_roles_of_child_org(self, session, hierarchy):
        h = hierarchy
        resolver = ChainOfCommandResolver(session)
        co_commander = resolver.ledger.create_role(h.co, "Co-Commander", rank=1, user_id=41)

        assert resolver.ledger.find_parent_role(co_commander.id).id == h.b1
        reports = resolver.find_direct_reports(h.bn, 1)
        assert _ids(reports) == [h.b2, h.c1, co_commander.id, h.d1]

    def test_reports_of_tied_peer(self, session, hierarchy):
        h = hierarchy
        resolver = ChainOfCommandResolver(session)
        peer = resolver.ledger.create_role(h.bn, "Second XO", rank=2, user_id=40)

        assert _ids(resolver.find_direct_reports_of(peer)) == [h.b3]
        b2 = resolver.ledger.find_by_id(h.b2)
        assert resolver.find_direct_reports_of(b2) == []
        assert resolver.find_direct_reports(h.bn, 2) == []

    def test_every_direct_report_resolves_to_the_seat(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session)
        for role in resolver.find_direct_reports(hierarchy.co, 1):
            assert resolver.ledger.find_parent_role(role.id).id == hierarchy.c1


# ─── Test 5: Bounded walks ───────────────────────────────────────────────────

class TestBoundedWalks:
    """Corrupt hierarchies surface as errors instead of hanging."""

    def test_depth_bound_applies_to_chains(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session, max_depth=1)
        with pytest.raises(HierarchyCorruptionError):
            resolver.find_org_coc(hierarchy.co)

    def test_ancestor_cycle_surfaces(self, session, hierarchy):
        resolver = ChainOfCommandResolver(session)
        root = resolver.tree.find_by_id(hierarchy.root)
        root.parent_id = hierarchy.co
        session.flush()
        with pytest.raises(HierarchyCorruptionError):
            resolver.find_user_coc(hierarchy.co, 7)

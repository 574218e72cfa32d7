"""Authorization Engine — allow/deny decisions from chain-of-command position.

Each ``ensure_*`` method either returns normally (allowed) or raises the
error kind the route layer reports. Decisions depend only on what the
Chain-of-Command Resolver and Role Ledger expose, never on profile data.

Role create/update only guard against double assignment inside one chain;
reordering requires a seat in the parent organization's chain.
"""

from __future__ import annotations

import structlog

from titan_orgs.errors import AuthenticationError, ValidationError
from titan_orgs.models import Report
from titan_orgs.services.chain_of_command import ChainOfCommandResolver
from titan_orgs.services.roles import ASSIGNEE_IN_COC

logger = structlog.get_logger()


class AuthorizationEngine:
    """Decision functions over the Chain-of-Command Resolver."""

    def __init__(self, resolver: ChainOfCommandResolver) -> None:
        self.resolver = resolver

    def ensure_can_create_role(self, org_id: int, assignee_id: int | None) -> None:
        """Reject an assignee who already sits in another organization of this chain."""
        if assignee_id is None:
            return
        existing = self.resolver.find_role_in_coc(assignee_id, org_id)
        if existing is not None and existing.organization_id != org_id:
            logger.info("role_assignment_denied", org_id=org_id, user_id=assignee_id, role_id=existing.id)
            raise ValidationError(ASSIGNEE_IN_COC)

    def ensure_can_update_role(self, org_id: int, assignee_id: int | None) -> None:
        """Same rule as creation: the assignee's chain seat must be in ``org_id``."""
        self.ensure_can_create_role(org_id, assignee_id)

    def ensure_can_reorder_roles(self, acting_user_id: int, org_id: int) -> None:
        if not self.resolver.is_user_in_parent_coc(acting_user_id, org_id):
            logger.info("reorder_denied", org_id=org_id, user_id=acting_user_id)
            raise AuthenticationError("User not found in parent CoC.")

    def ensure_can_acknowledge(self, report: Report, acting_user_id: int) -> None:
        """Only the holder of the submitting role's parent may acknowledge."""
        parent = self.resolver.ledger.find_parent_role(report.role_id)
        if parent is None or parent.user_id is None or parent.user_id != acting_user_id:
            logger.info("acknowledge_denied", report_id=report.id, user_id=acting_user_id)
            raise AuthenticationError("Only the direct superior may acknowledge this report.")

    def report_rank_scope(self, acting_user_id: int, org_id: int) -> int | None:
        """Return the lowest-authority rank whose reports the user may read.

        A seat inside ``org_id`` limits visibility to reports filed at or
        below that seat's rank. A seat in an ancestor organization sees every
        report (``None``). No seat at all is refused.
        """
        role = self.resolver.find_role_in_coc(acting_user_id, org_id)
        if role is None:
            raise AuthenticationError("User is not in this organization's CoC.")
        if role.organization_id == org_id:
            return role.rank
        return None

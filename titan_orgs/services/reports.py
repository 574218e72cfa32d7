"""Report Lifecycle — submission and acknowledgment up the chain of command.

Reports move from SUBMITTED to ACKNOWLEDGED exactly once. The acknowledging
user must hold the parent role of the submitting role; that check runs
through the Authorization Engine before any row changes.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from titan_orgs.errors import AuthenticationError, NotFoundError, ValidationError
from titan_orgs.models import OrganizationRole, Report
from titan_orgs.services.authorization import AuthorizationEngine
from titan_orgs.services.chain_of_command import ChainOfCommandResolver

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ReportLifecycle:
    """Create, list and acknowledge organization reports."""

    def __init__(self, session: Session, resolver: ChainOfCommandResolver) -> None:
        self.session = session
        self.resolver = resolver
        self.authorization = AuthorizationEngine(resolver)

    def find_by_id(self, report_id: int) -> Report:
        report = self.session.get(Report, report_id)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    def save_report(self, report: Report) -> Report:
        """Persist a new report, stamping submission and audit dates."""
        now = _now()
        report.submission_date = now
        report.date_created = now
        report.date_modified = now
        self.session.add(report)
        self.session.flush()
        logger.info("report_submitted", report_id=report.id, role_id=report.role_id)
        return report

    def submit_report(
        self,
        org_id: int,
        user_id: int,
        comments: str,
        term_start_date: datetime,
    ) -> Report:
        """File a report against the ranked role ``user_id`` holds in ``org_id``."""
        self.resolver.tree.find_by_id(org_id)
        role = self.resolver.ledger.find_org_role_by_user_id(org_id, user_id, ranked_only=True)
        if role is None:
            raise AuthenticationError("User holds no ranked role in this organization.")
        return self.save_report(
            Report(role_id=role.id, term_start_date=term_start_date, comments=comments)
        )

    def ack_report(self, report_id: int, acking_user_id: int) -> Report:
        """Mark a report acknowledged. Callers must have authorized the user."""
        report = self.find_by_id(report_id)
        if report.is_acknowledged:
            raise ValidationError("Report already acknowledged")
        now = _now()
        report.ack_user_id = acking_user_id
        report.ack_date = now
        report.date_modified = now
        self.session.flush()
        logger.info("report_acknowledged", report_id=report_id, user_id=acking_user_id)
        return report

    def acknowledge(self, report_id: int, acting_user_id: int) -> Report:
        report = self.find_by_id(report_id)
        self.authorization.ensure_can_acknowledge(report, acting_user_id)
        return self.ack_report(report_id, acting_user_id)

    def find_all_by_organization(self, org_id: int, min_rank: int | None = None) -> list[Report]:
        """Reports filed by ranked roles of ``org_id``.

        With ``min_rank`` only roles at that rank or below (numerically
        greater or equal) are included.
        """
        stmt = (
            select(Report)
            .join(OrganizationRole, OrganizationRole.id == Report.role_id)
            .where(
                OrganizationRole.organization_id == org_id,
                OrganizationRole.rank.is_not(None),
            )
            .order_by(Report.id)
        )
        if min_rank is not None:
            stmt = stmt.where(OrganizationRole.rank >= min_rank)
        return list(self.session.execute(stmt).scalars())

    def list_for_user(self, org_id: int, acting_user_id: int) -> list[Report]:
        self.resolver.tree.find_by_id(org_id)
        min_rank = self.authorization.report_rank_scope(acting_user_id, org_id)
        return self.find_all_by_organization(org_id, min_rank=min_rank)

    def find_unacknowledged_by_role_ids(self, role_ids: list[int]) -> list[Report]:
        if not role_ids:
            return []
        return list(
            self.session.execute(
                select(Report)
                .where(
                    Report.role_id.in_(role_ids),
                    Report.ack_user_id.is_(None),
                    Report.ack_date.is_(None),
                )
                .order_by(Report.id)
            ).scalars()
        )

    def find_pending_for_user(self, user_id: int) -> list[Report]:
        """Unacknowledged reports from direct reports of any role the user holds."""
        direct_report_ids: list[int] = []
        for role in self.resolver.ledger.find_ranked_by_user_id(user_id):
            for report_role in self.resolver.find_direct_reports_of(role):
                if report_role.id not in direct_report_ids:
                    direct_report_ids.append(report_role.id)
        return self.find_unacknowledged_by_role_ids(direct_report_ids)

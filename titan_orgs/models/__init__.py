"""Database models for Titan Organizations."""

from titan_orgs.models.base import Base
from titan_orgs.models.organization import Organization, OrganizationUser
from titan_orgs.models.role import OrganizationRole
from titan_orgs.models.report import Report, ReportState

__all__ = [
    "Base",
    "Organization",
    "OrganizationUser",
    "OrganizationRole",
    "Report",
    "ReportState",
]

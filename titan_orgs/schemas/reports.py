"""Schemas for report endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from titan_orgs.models import ReportState
from titan_orgs.schemas.profiles import UserProfile
from titan_orgs.schemas.roles import RoleResponse


class CreateReportRequest(BaseModel):
    """Body for filing a report against the caller's own role."""

    comments: str = Field(..., max_length=20000)
    term_start_date: datetime


class ReportResponse(BaseModel):
    """A report with its submitting role and acknowledger."""

    id: int
    role_id: int
    state: ReportState
    term_start_date: datetime
    submission_date: datetime | None = None
    comments: str | None = None
    ack_user_id: int | None = None
    ack_date: datetime | None = None
    date_created: datetime
    date_modified: datetime
    role: RoleResponse
    ack_user: UserProfile | None = None

"""Report model — periodic reports submitted up the chain of command."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from titan_orgs.models.base import Base


class ReportState(str, enum.Enum):
    """Persisted report states. Drafts never reach the store."""

    SUBMITTED = "submitted"
    ACKNOWLEDGED = "acknowledged"


class Report(Base):
    """A report filed by the holder of ``role_id``."""

    __tablename__ = "organization_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organization_roles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    term_start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    submission_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    ack_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ack_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @property
    def is_acknowledged(self) -> bool:
        return self.ack_user_id is not None and self.ack_date is not None

    @property
    def state(self) -> ReportState:
        return ReportState.ACKNOWLEDGED if self.is_acknowledged else ReportState.SUBMITTED

    def __repr__(self) -> str:
        return f"<Report {self.id} role={self.role_id} state={self.state.value}>"

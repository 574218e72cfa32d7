"""Organization role model — ranked or unranked positions within an organization."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from titan_orgs.models.base import Base


class OrganizationRole(Base):
    """A role inside one organization, optionally held by a user.

    ``rank`` is ``None`` for unranked roles; lower numbers carry more
    authority. ``position`` orders roles that share a rank and is the
    field rewritten by a reorder.
    """

    __tablename__ = "organization_roles"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_roles_org_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None

    @property
    def is_vacant(self) -> bool:
        return self.user_id is None

    def __repr__(self) -> str:
        return f"<OrganizationRole {self.id} org={self.organization_id} rank={self.rank}>"

"""Organization models — the hierarchy nodes and their members."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from titan_orgs.models.base import Base, TimestampMixin


class Organization(TimestampMixin, Base):
    """A node in the organization forest.

    Parent links are stored as identifiers only; traversal goes through
    ``OrganizationTree`` lookups rather than ORM relationships.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("organizations.id"), nullable=True, index=True
    )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def __repr__(self) -> str:
        return f"<Organization {self.slug}>"


class OrganizationUser(Base):
    """General membership of a user in an organization, independent of rank."""

    __tablename__ = "organization_users"

    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    def __repr__(self) -> str:
        return f"<OrganizationUser org={self.organization_id} user={self.user_id}>"

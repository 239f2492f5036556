"""Maintenance log model for repairs, cleaning, and inspections on a property."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

MAINTENANCE_CATEGORIES = ("plumbing", "electrical", "cleaning", "repair", "inspection", "other")
MAINTENANCE_PRIORITIES = ("low", "medium", "high", "urgent")
MAINTENANCE_STATUSES = ("pending", "in_progress", "completed", "cancelled")


class MaintenanceLog(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A unit of maintenance work, optionally assigned to a team member."""

    __tablename__ = "maintenance_logs"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("team_members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(20), default="other", index=True)
    priority: Mapped[str] = mapped_column(String(10), default="medium")
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list | None] = mapped_column(JSON, default=list)

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="maintenance_logs", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<MaintenanceLog(id={self.id}, title={self.title!r}, status={self.status})>"

"""Team member and task models for the people who run the properties."""

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

MEMBER_STATUSES = ("active", "inactive", "on_leave")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")
TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")


class TeamMember(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Staff such as cleaners, concierges, and maintenance crew."""

    __tablename__ = "team_members"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(100), default="Staff")
    assigned_properties: Mapped[list | None] = mapped_column(JSON, default=list)  # property ids
    status: Mapped[str] = mapped_column(String(20), default="active", index=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TeamMember(id={self.id}, name={self.name!r}, role={self.role!r})>"


class TeamTask(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A to-do item, optionally tied to a property and a team member."""

    __tablename__ = "team_tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("team_members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    priority: Mapped[str] = mapped_column(String(10), default="medium")
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<TeamTask(id={self.id}, title={self.title!r}, status={self.status})>"

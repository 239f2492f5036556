"""Guest communication models: reusable templates, automations, and the message log."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

TEMPLATE_CATEGORIES = ("booking_confirmation", "check_in", "check_out", "thank_you", "custom")
AUTOMATION_TRIGGERS = (
    "booking_confirmed",
    "check_in_24h",
    "check_in_day",
    "check_out_24h",
    "check_out_complete",
)
MESSAGE_DIRECTIONS = ("outgoing", "incoming")
MESSAGE_STATUSES = ("sent", "delivered", "read", "failed")


class MessageTemplate(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Message text a host reuses, e.g. check-in instructions."""

    __tablename__ = "message_templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(30), default="custom", index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    automations: Mapped[list["MessageAutomation"]] = relationship(
        back_populates="template", lazy="selectin", cascade="all, delete-orphan"
    )


class MessageAutomation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Binds a template to a booking lifecycle trigger."""

    __tablename__ = "message_automations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    trigger: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    template_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("message_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    template: Mapped[MessageTemplate] = relationship(back_populates="automations", lazy="selectin")


class GuestMessage(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One message in a host/guest conversation. Delivery happens elsewhere."""

    __tablename__ = "guest_messages"

    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    direction: Mapped[str] = mapped_column(String(10), default="outgoing")
    status: Mapped[str] = mapped_column(String(10), default="sent")
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    guest: Mapped["Guest"] = relationship(back_populates="messages")  # type: ignore[name-defined]  # noqa: F821

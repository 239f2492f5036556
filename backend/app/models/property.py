"""Property model for shortlet apartments, villas, houses, and studios."""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

PROPERTY_TYPES = ("apartment", "villa", "house", "studio", "penthouse")
PROPERTY_STATUSES = ("available", "occupied", "maintenance", "inactive")


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A rentable unit together with its rate table."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    property_type: Mapped[str] = mapped_column(String(50), default="apartment")
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, default=None)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), default="Nigeria")
    bedrooms: Mapped[int] = mapped_column(Integer, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1)
    max_guests: Mapped[int] = mapped_column(Integer, default=2)

    # Rate table, in the property's base currency
    base_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    weekend_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    weekly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    monthly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    status: Mapped[str] = mapped_column(String(50), default="available", index=True)
    amenities: Mapped[list | None] = mapped_column(JSON, default=list)
    rules: Mapped[str | None] = mapped_column(Text, default=None)
    check_in_time: Mapped[str] = mapped_column(String(5), default="14:00")
    check_out_time: Mapped[str] = mapped_column(String(5), default="11:00")
    min_stay: Mapped[int] = mapped_column(Integer, default=1)  # nights
    max_stay: Mapped[int | None] = mapped_column(Integer, default=None)  # nights
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="property", lazy="selectin", cascade="all, delete-orphan"
    )
    maintenance_logs: Mapped[list["MaintenanceLog"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="property", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r}, type={self.property_type!r})>"

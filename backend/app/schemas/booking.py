"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from app.schemas.common import reject_explicit_nulls
from app.schemas.property import PropertyResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for the booking form. Pricing is computed server-side."""

    property_id: uuid.UUID
    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_email: EmailStr
    guest_phone: str = Field(..., min_length=1, max_length=50)
    check_in: date
    check_out: date
    number_of_guests: int = Field(1, ge=1)
    special_requests: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


_BOOKING_REQUIRED_FIELDS = (
    "guest_name",
    "guest_email",
    "guest_phone",
    "check_in",
    "check_out",
    "number_of_guests",
    "payment_status",
)


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. All fields optional.

    Status changes go through the dedicated transition endpoints.
    """

    guest_name: str | None = Field(None, min_length=1, max_length=255)
    guest_email: EmailStr | None = None
    guest_phone: str | None = Field(None, min_length=1, max_length=50)
    check_in: date | None = None
    check_out: date | None = None
    number_of_guests: int | None = Field(None, ge=1)
    payment_status: str | None = Field(None, pattern="^(unpaid|partial|paid|refunded)$")
    payment_method: str | None = Field(None, max_length=50)
    payment_reference: str | None = Field(None, max_length=255)
    special_requests: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingUpdate":
        """Reject nulls for required columns; if both dates are provided, validate check_out > check_in."""
        reject_explicit_nulls(self, _BOOKING_REQUIRED_FIELDS)
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingCancel(BaseModel):
    """Optional cancellation details."""

    reason: str | None = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Standard booking response returned from CRUD operations."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID | None = None
    guest_name: str
    guest_email: str
    guest_phone: str
    number_of_guests: int
    check_in: date
    check_out: date
    number_of_nights: int
    base_amount: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    total_amount: Decimal
    status: str
    payment_status: str
    payment_method: str | None = None
    payment_reference: str | None = None
    special_requests: str | None = None
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Booking response with the nested property."""

    property: PropertyResponse | None = None


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingResponse]
    total: int

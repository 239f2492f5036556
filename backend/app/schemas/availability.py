"""Schemas for availability, pricing, and calendar queries."""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from app.schemas.booking import BookingResponse


class AvailabilityResponse(BaseModel):
    """Whether a property is free for a specific date range."""

    property_id: uuid.UUID
    check_in: date
    check_out: date
    is_available: bool


class AvailableDatesResponse(BaseModel):
    """Free dates in ``[start_date, start_date + days]``."""

    property_id: uuid.UUID
    start_date: date
    days: int
    available_dates: list[date]


class PriceQuoteResponse(BaseModel):
    """Price breakdown for a prospective stay."""

    property_id: uuid.UUID
    check_in: date
    check_out: date
    number_of_guests: int
    currency: str
    nights: int
    base_amount: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    total_amount: Decimal


class CalendarResponse(BaseModel):
    """Bookings touching a calendar month, ordered by check-in."""

    property_id: uuid.UUID
    year: int
    month: int
    bookings: list[BookingResponse]

"""Booking availability and pricing engine.

Answers four questions about a property: is it free for a date range, which
dates in a horizon are free, what does a stay cost, and which bookings fall
in a calendar month.

All date ranges are half-open ``[check_in, check_out)``: a guest checking
out on day X and another checking in on day X do not collide.

The engine holds no state of its own. It reads properties through a
``PropertyCatalog`` and bookings through a ``BookingStore``; the API layer
builds one per request from the request's database session (see
``app.api.deps.get_booking_engine``), and tests pass in-memory fakes.
"""

from __future__ import annotations

import calendar
import logging
import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from app.models.booking import BOOKING_STATUSES, PAYMENT_STATUSES
from app.services.exceptions import NotFoundError, ServiceError, ValidationError

logger = logging.getLogger(__name__)

SERVICE_FEE_RATE = Decimal("0.05")
WEEKEND_WEEKDAYS = frozenset({4, 5})  # Friday, Saturday nights
NIGHTS_PER_WEEK = 7
NIGHTS_PER_MONTH = 30

# Bookings in these states no longer hold the property.
AVAILABILITY_IGNORED_STATUSES = frozenset({"cancelled", "checked-out"})
# Calendar and free-date views still show completed stays.
CALENDAR_IGNORED_STATUSES = frozenset({"cancelled"})

_CENT = Decimal("0.01")


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------


class RatedProperty(Protocol):
    """The slice of a property the engine reads."""

    id: uuid.UUID
    max_guests: int
    base_rate: Decimal
    weekend_rate: Decimal | None
    weekly_rate: Decimal | None
    monthly_rate: Decimal | None
    cleaning_fee: Decimal | None


class StoredBooking(Protocol):
    """The slice of a booking the engine reads."""

    id: uuid.UUID
    property_id: uuid.UUID
    check_in: date
    check_out: date
    status: str


class PropertyCatalog(Protocol):
    async def get_property_by_id(self, property_id: uuid.UUID) -> RatedProperty | None: ...


class BookingStore(Protocol):
    async def list_bookings(self, booking_filter: BookingFilter) -> list[StoredBooking]: ...


@dataclass(frozen=True)
class BookingFilter:
    """Named query criteria understood by every ``BookingStore``.

    ``overlaps`` is a half-open window ``(start, end)``; a booking matches when
    its own range intersects it. Unset fields do not constrain the query.
    Results are ordered by check-in ascending.
    """

    property_id: uuid.UUID | None = None
    exclude_booking_id: uuid.UUID | None = None
    status: str | None = None
    exclude_statuses: frozenset[str] = field(default_factory=frozenset)
    payment_status: str | None = None
    overlaps: tuple[date, date] | None = None
    check_in_from: date | None = None
    check_out_to: date | None = None
    guest_email: str | None = None

    def __post_init__(self) -> None:
        unknown = {s for s in (self.status, *self.exclude_statuses) if s is not None} - set(BOOKING_STATUSES)
        if unknown:
            raise ValidationError(f"Unknown booking status: {', '.join(sorted(unknown))}", field="status")
        if self.payment_status is not None and self.payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"Unknown payment status: {self.payment_status}", field="payment_status")
        if self.overlaps is not None:
            start, end = self.overlaps
            if end <= start:
                raise ValidationError("Overlap window end must be after its start", field="overlaps")

    def matches(self, booking: StoredBooking) -> bool:
        """Evaluate the filter against one booking in memory."""
        if self.property_id is not None and booking.property_id != self.property_id:
            return False
        if self.exclude_booking_id is not None and booking.id == self.exclude_booking_id:
            return False
        if self.status is not None and booking.status != self.status:
            return False
        if booking.status in self.exclude_statuses:
            return False
        if self.payment_status is not None and getattr(booking, "payment_status", None) != self.payment_status:
            return False
        if self.overlaps is not None and not ranges_overlap(
            booking.check_in, booking.check_out, *self.overlaps
        ):
            return False
        if self.check_in_from is not None and booking.check_in < self.check_in_from:
            return False
        if self.check_out_to is not None and booking.check_out > self.check_out_to:
            return False
        if self.guest_email is not None and getattr(booking, "guest_email", None) != self.guest_email:
            return False
        return True


@dataclass(frozen=True)
class PriceBreakdown:
    """Priced stay. Every amount is rounded to 2 decimal places."""

    nights: int
    base_amount: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    total_amount: Decimal

    def as_dict(self) -> dict:
        return {
            "nights": self.nights,
            "base_amount": self.base_amount,
            "cleaning_fee": self.cleaning_fee,
            "service_fee": self.service_fee,
            "total_amount": self.total_amount,
        }


# ---------------------------------------------------------------------------
# Date arithmetic
# ---------------------------------------------------------------------------


def ranges_overlap(existing_start: date, existing_end: date, start: date, end: date) -> bool:
    """Three-way overlap test between an existing stay and a candidate range.

    Both ranges are half-open. They conflict when the existing stay starts
    inside the candidate, ends inside it, or fully contains it.
    """
    starts_inside = start <= existing_start < end
    ends_inside = start < existing_end <= end
    contains = existing_start <= start and existing_end >= end
    return starts_inside or ends_inside or contains


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two calendar dates."""
    return (check_out - check_in).days


def require_valid_range(check_in: date, check_out: date) -> None:
    if check_out <= check_in:
        raise ValidationError("check_out must be after check_in", field="check_out")


def iter_nights(check_in: date, check_out: date) -> Iterator[date]:
    """Yield the date of every night in ``[check_in, check_out)``."""
    day = check_in
    while day < check_out:
        yield day
        day += timedelta(days=1)


def occupied_dates(bookings: Iterable[StoredBooking]) -> set[date]:
    """Every night held by any of the given bookings."""
    booked: set[date] = set()
    for booking in bookings:
        booked.update(iter_nights(booking.check_in, booking.check_out))
    return booked


def iter_available_dates(start: date, days: int, booked: set[date]) -> Iterator[date]:
    """Yield dates in ``[start, start + days]`` (inclusive) missing from ``booked``."""
    for offset in range(days + 1):
        day = start + timedelta(days=offset)
        if day not in booked:
            yield day


def month_window(year: int, month: int) -> tuple[date, date]:
    """Half-open window covering a calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    if not date.min.year <= year < date.max.year:
        raise ValidationError("year is out of range", field="year")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day) + timedelta(days=1)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


def _money(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _round(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def is_weekend_night(night: date) -> bool:
    return night.weekday() in WEEKEND_WEEKDAYS


def price_stay(prop: RatedProperty, check_in: date, check_out: date) -> PriceBreakdown:
    """Price a stay against a property's rate table.

    Nights are first priced one by one (weekend rate on Friday and Saturday
    nights when the property has one). A monthly or weekly rate, when it
    applies, then replaces that sum entirely: whole months (or weeks) at the
    tier rate plus leftover nights at the base rate. A zero or missing tier
    rate counts as absent.
    """
    require_valid_range(check_in, check_out)
    nights = count_nights(check_in, check_out)
    base_rate = _money(prop.base_rate)
    weekend_rate = _money(prop.weekend_rate) if prop.weekend_rate else None

    base_amount = Decimal("0")
    for night in iter_nights(check_in, check_out):
        if weekend_rate is not None and is_weekend_night(night):
            base_amount += weekend_rate
        else:
            base_amount += base_rate

    if nights >= NIGHTS_PER_MONTH and prop.monthly_rate:
        months, remaining = divmod(nights, NIGHTS_PER_MONTH)
        base_amount = months * _money(prop.monthly_rate) + remaining * base_rate
    elif nights >= NIGHTS_PER_WEEK and prop.weekly_rate:
        weeks, remaining = divmod(nights, NIGHTS_PER_WEEK)
        base_amount = weeks * _money(prop.weekly_rate) + remaining * base_rate

    base_amount = _round(base_amount)
    cleaning_fee = _round(_money(prop.cleaning_fee))
    service_fee = _round(base_amount * SERVICE_FEE_RATE)
    return PriceBreakdown(
        nights=nights,
        base_amount=base_amount,
        cleaning_fee=cleaning_fee,
        service_fee=service_fee,
        total_amount=base_amount + cleaning_fee + service_fee,
    )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class BookingEngine:
    """Availability and pricing queries over a property catalog and booking store."""

    def __init__(self, catalog: PropertyCatalog, store: BookingStore) -> None:
        self.catalog = catalog
        self.store = store

    async def check_availability(
        self,
        property_id: uuid.UUID,
        check_in: date,
        check_out: date,
        exclude_booking_id: uuid.UUID | None = None,
    ) -> bool:
        """Return True when no active booking overlaps ``[check_in, check_out)``.

        Cancelled and checked-out bookings are ignored, as is
        ``exclude_booking_id`` (the booking being edited).
        """
        require_valid_range(check_in, check_out)
        booking_filter = BookingFilter(
            property_id=property_id,
            exclude_booking_id=exclude_booking_id,
            exclude_statuses=AVAILABILITY_IGNORED_STATUSES,
            overlaps=(check_in, check_out),
        )
        try:
            bookings = await self.store.list_bookings(booking_filter)
        except Exception:
            logger.exception("Error checking availability for property %s", property_id)
            raise

        return not any(
            ranges_overlap(b.check_in, b.check_out, check_in, check_out)
            for b in bookings
            if b.status not in AVAILABILITY_IGNORED_STATUSES and b.id != exclude_booking_id
        )

    async def get_available_dates(self, property_id: uuid.UUID, start_date: date, days: int) -> list[date]:
        """List the free dates in ``[start_date, start_date + days]``, ascending."""
        if days < 0:
            raise ValidationError("days must not be negative", field="days")
        end_date = start_date + timedelta(days=days)
        booking_filter = BookingFilter(
            property_id=property_id,
            exclude_statuses=CALENDAR_IGNORED_STATUSES,
            overlaps=(start_date, end_date + timedelta(days=1)),
        )
        try:
            bookings = await self.store.list_bookings(booking_filter)
        except Exception:
            logger.exception("Error getting available dates for property %s", property_id)
            raise

        booked = occupied_dates(b for b in bookings if b.status not in CALENDAR_IGNORED_STATUSES)
        return list(iter_available_dates(start_date, days, booked))

    async def calculate_booking_price(
        self,
        property_id: uuid.UUID,
        check_in: date,
        check_out: date,
        guests: int = 1,
    ) -> PriceBreakdown:
        """Price a stay. Raises ``NotFoundError`` for an unknown property."""
        require_valid_range(check_in, check_out)
        try:
            prop = await self.catalog.get_property_by_id(property_id)
        except ServiceError:
            raise
        except Exception:
            logger.exception("Error calculating booking price for property %s", property_id)
            raise

        if prop is None:
            raise NotFoundError("Property", property_id)
        if guests < 1:
            raise ValidationError("At least one guest is required", field="number_of_guests")
        if prop.max_guests and guests > prop.max_guests:
            raise ValidationError(
                f"Property can accommodate maximum {prop.max_guests} guests",
                field="number_of_guests",
            )
        return price_stay(prop, check_in, check_out)

    async def get_booking_calendar(self, property_id: uuid.UUID, year: int, month: int) -> list[StoredBooking]:
        """Non-cancelled bookings that touch the given month, by check-in."""
        window = month_window(year, month)
        booking_filter = BookingFilter(
            property_id=property_id,
            exclude_statuses=CALENDAR_IGNORED_STATUSES,
            overlaps=window,
        )
        try:
            bookings = await self.store.list_bookings(booking_filter)
        except Exception:
            logger.exception("Error getting booking calendar for property %s", property_id)
            raise

        return sorted(
            (b for b in bookings if booking_filter.matches(b)),
            key=lambda b: b.check_in,
        )

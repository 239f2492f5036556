"""Booking workflow: create, edit, and move bookings through their lifecycle.

Every write follows the same sequence inside the request's transaction:
lock the property row, check availability, price the stay, persist. The
row lock serializes concurrent writers for one property, so two requests
cannot both pass the availability check for overlapping dates.
"""

import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.models.guest import Guest
from app.models.property import Property
from app.repositories.booking_repository import SqlBookingStore
from app.repositories.property_repository import SqlPropertyCatalog
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.booking_engine import BookingEngine, PriceBreakdown, count_nights, require_valid_range
from app.services.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BOOKING_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"checked-in", "cancelled"}),
    "checked-in": frozenset({"checked-out"}),
    "checked-out": frozenset(),
    "cancelled": frozenset(),
}
LOCKED_STATUSES = frozenset({"checked-out", "cancelled"})
DEFAULT_CANCELLATION_REASON = "Cancelled by user"


def build_engine(db: AsyncSession) -> BookingEngine:
    """Wire a booking engine to the given session."""
    return BookingEngine(SqlPropertyCatalog(db), SqlBookingStore(db))


def _validate_stay(prop: Property, check_in: date, check_out: date, number_of_guests: int) -> None:
    """Check a stay against the property's guest and stay-length limits."""
    require_valid_range(check_in, check_out)
    if number_of_guests > prop.max_guests:
        raise ValidationError(
            f"Property can accommodate maximum {prop.max_guests} guests",
            field="number_of_guests",
        )
    nights = count_nights(check_in, check_out)
    if prop.min_stay and nights < prop.min_stay:
        raise ValidationError(f"Minimum stay is {prop.min_stay} nights", field="check_out")
    if prop.max_stay and nights > prop.max_stay:
        raise ValidationError(f"Maximum stay is {prop.max_stay} nights", field="check_out")


def _apply_pricing(booking: Booking, pricing: PriceBreakdown) -> None:
    booking.number_of_nights = pricing.nights
    booking.base_amount = pricing.base_amount
    booking.cleaning_fee = pricing.cleaning_fee
    booking.service_fee = pricing.service_fee
    booking.total_amount = pricing.total_amount


async def _lock_bookable_property(catalog: SqlPropertyCatalog, property_id: uuid.UUID) -> Property:
    prop = await catalog.lock_property(property_id)
    if prop is None:
        raise NotFoundError("Property", property_id)
    if not prop.is_active or prop.status == "inactive":
        raise ConflictError("Property is not accepting bookings")
    return prop


async def _find_or_create_guest(db: AsyncSession, name: str, email: str, phone: str) -> Guest:
    """Return the guest with this email, creating one if needed."""
    result = await db.execute(select(Guest).where(Guest.email == email))
    guest = result.scalar_one_or_none()
    if guest is not None:
        return guest

    logger.info("Creating guest record for %s", email)
    guest = Guest(name=name, email=email, phone=phone)
    db.add(guest)
    await db.flush()
    return guest


async def _relink_guest(db: AsyncSession, booking: Booking, name: str, email: str, phone: str) -> None:
    """Point the booking at the guest owning ``email`` and move its booking count."""
    previous = await db.get(Guest, booking.guest_id) if booking.guest_id is not None else None
    guest = await _find_or_create_guest(db, name, email, phone)
    if previous is not None and previous.id == guest.id:
        return

    if previous is not None:
        previous.total_bookings = max((previous.total_bookings or 0) - 1, 0)
    guest.total_bookings = (guest.total_bookings or 0) + 1
    booking.guest = guest
    logger.info("Booking %s moved to guest %s", booking.id, email)


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking", booking_id)
    return booking


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """Create a pending, unpaid booking after checking availability.

    Raises:
        NotFoundError: the property does not exist.
        ValidationError: too many guests or a stay outside min/max stay.
        ConflictError: the property is inactive or the dates are taken.
    """
    catalog = SqlPropertyCatalog(db)
    prop = await _lock_bookable_property(catalog, data.property_id)
    _validate_stay(prop, data.check_in, data.check_out, data.number_of_guests)

    engine = BookingEngine(catalog, SqlBookingStore(db))
    if not await engine.check_availability(prop.id, data.check_in, data.check_out):
        raise ConflictError("Property is not available for selected dates")

    pricing = await engine.calculate_booking_price(prop.id, data.check_in, data.check_out, data.number_of_guests)
    guest = await _find_or_create_guest(db, data.guest_name, data.guest_email, data.guest_phone)

    booking = Booking(
        property_id=prop.id,
        guest_id=guest.id,
        guest_name=data.guest_name,
        guest_email=data.guest_email,
        guest_phone=data.guest_phone,
        number_of_guests=data.number_of_guests,
        check_in=data.check_in,
        check_out=data.check_out,
        special_requests=data.special_requests,
        status="pending",
        payment_status="unpaid",
    )
    _apply_pricing(booking, pricing)
    guest.total_bookings = (guest.total_bookings or 0) + 1

    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info(
        "Booking created: %s for property %s (%s to %s, total %s)",
        booking.id,
        prop.name,
        booking.check_in,
        booking.check_out,
        booking.total_amount,
    )
    return booking


async def update_booking(db: AsyncSession, booking_id: uuid.UUID, data: BookingUpdate) -> Booking:
    """Partially update a booking, re-validating and re-pricing on date or guest changes."""
    booking = await get_booking(db, booking_id)
    if booking.status in LOCKED_STATUSES:
        raise ConflictError(f"Cannot modify a {booking.status} booking")

    update_data = data.model_dump(exclude_unset=True)
    check_in = update_data.pop("check_in", None) or booking.check_in
    check_out = update_data.pop("check_out", None) or booking.check_out
    number_of_guests = update_data.pop("number_of_guests", None) or booking.number_of_guests

    dates_changed = (check_in, check_out) != (booking.check_in, booking.check_out)
    guests_changed = number_of_guests != booking.number_of_guests

    if dates_changed or guests_changed:
        catalog = SqlPropertyCatalog(db)
        prop = await _lock_bookable_property(catalog, booking.property_id)
        _validate_stay(prop, check_in, check_out, number_of_guests)

        engine = BookingEngine(catalog, SqlBookingStore(db))
        if dates_changed and not await engine.check_availability(
            prop.id, check_in, check_out, exclude_booking_id=booking.id
        ):
            raise ConflictError("Property is not available for selected dates")

        pricing = await engine.calculate_booking_price(prop.id, check_in, check_out, number_of_guests)
        booking.check_in = check_in
        booking.check_out = check_out
        booking.number_of_guests = number_of_guests
        _apply_pricing(booking, pricing)

    new_email = update_data.get("guest_email")
    if new_email is not None and new_email != booking.guest_email:
        await _relink_guest(
            db,
            booking,
            name=update_data.get("guest_name", booking.guest_name),
            email=new_email,
            phone=update_data.get("guest_phone", booking.guest_phone),
        )

    for field, value in update_data.items():
        setattr(booking, field, value)

    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info("Booking updated: %s (repriced=%s)", booking.id, dates_changed or guests_changed)
    return booking


async def transition_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    target: str,
    reason: str | None = None,
) -> Booking:
    """Move a booking to ``target`` if the lifecycle allows it.

    Raises ``ConflictError`` for transitions outside ``BOOKING_TRANSITIONS``.
    """
    booking = await get_booking(db, booking_id)
    allowed = BOOKING_TRANSITIONS.get(booking.status, frozenset())
    if target not in allowed:
        raise ConflictError(f"Cannot change booking status from {booking.status} to {target}")

    previous = booking.status
    booking.status = target
    guest = await db.get(Guest, booking.guest_id) if booking.guest_id is not None else None
    if target == "cancelled":
        booking.cancelled_at = datetime.now(timezone.utc)
        booking.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
        if guest is not None:
            guest.total_bookings = max((guest.total_bookings or 0) - 1, 0)
    elif target == "checked-out" and guest is not None:
        guest.total_spent = (guest.total_spent or 0) + booking.total_amount

    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info("Booking %s moved from %s to %s", booking.id, previous, target)
    return booking


async def confirm_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, "confirmed")


async def check_in_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, "checked-in")


async def check_out_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, "checked-out")


async def cancel_booking(db: AsyncSession, booking_id: uuid.UUID, reason: str | None = None) -> Booking:
    """Soft-cancel: the record stays, but no longer blocks availability."""
    return await transition_booking(db, booking_id, "cancelled", reason=reason)

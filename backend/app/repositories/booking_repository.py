"""SQLAlchemy-backed booking store.

Translates a ``BookingFilter`` into a ``WHERE`` clause. The overlap window
uses the half-open intersection ``check_in < end AND check_out > start``,
which selects exactly the bookings the engine's three-way test would flag.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.services.booking_engine import BookingFilter


def apply_booking_filter(query: Select, booking_filter: BookingFilter) -> Select:
    """Add the filter's criteria to a ``select(Booking)`` query."""
    if booking_filter.property_id is not None:
        query = query.where(Booking.property_id == booking_filter.property_id)
    if booking_filter.exclude_booking_id is not None:
        query = query.where(Booking.id != booking_filter.exclude_booking_id)
    if booking_filter.status is not None:
        query = query.where(Booking.status == booking_filter.status)
    if booking_filter.exclude_statuses:
        query = query.where(Booking.status.not_in(sorted(booking_filter.exclude_statuses)))
    if booking_filter.payment_status is not None:
        query = query.where(Booking.payment_status == booking_filter.payment_status)
    if booking_filter.overlaps is not None:
        start, end = booking_filter.overlaps
        query = query.where(Booking.check_in < end, Booking.check_out > start)
    if booking_filter.check_in_from is not None:
        query = query.where(Booking.check_in >= booking_filter.check_in_from)
    if booking_filter.check_out_to is not None:
        query = query.where(Booking.check_out <= booking_filter.check_out_to)
    if booking_filter.guest_email is not None:
        query = query.where(Booking.guest_email == booking_filter.guest_email)
    return query


class SqlBookingStore:
    """Read access to bookings. Does not commit; the caller owns the transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_bookings(self, booking_filter: BookingFilter) -> list[Booking]:
        query = apply_booking_filter(select(Booking), booking_filter)
        result = await self.session.execute(query.order_by(Booking.check_in.asc()))
        return list(result.scalars().all())

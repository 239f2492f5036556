"""Properties API routes: CRUD plus availability, pricing, and calendar queries."""

import uuid
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_engine, get_db
from app.api.errors import to_http_exception
from app.config import settings
from app.models.booking import Booking
from app.models.property import Property
from app.models.team import TeamTask
from app.schemas.availability import (
    AvailabilityResponse,
    AvailableDatesResponse,
    CalendarResponse,
    PriceQuoteResponse,
)
from app.schemas.booking import BookingListResponse, BookingResponse
from app.schemas.common import MessageResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from app.services.booking_engine import BookingEngine
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


async def _get_property_or_404(db: AsyncSession, property_id: uuid.UUID) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id))
    prop = result.scalar_one_or_none()

    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return prop


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    """Create a property with its rate table."""
    prop = Property(**body.model_dump())
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List active properties",
)
async def list_properties(
    status_filter: str | None = Query(None, alias="status"),
    city: str | None = Query(None),
    bedrooms: int | None = Query(None, ge=0),
    min_rate: Decimal | None = Query(None, ge=0, description="Minimum base rate"),
    max_rate: Decimal | None = Query(None, ge=0, description="Maximum base rate"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Return paginated active properties."""
    filters = [Property.is_active.is_(True)]
    if status_filter is not None:
        filters.append(Property.status == status_filter)
    if city is not None:
        filters.append(Property.city == city)
    if bedrooms is not None:
        filters.append(Property.bedrooms == bedrooms)
    if min_rate is not None:
        filters.append(Property.base_rate >= min_rate)
    if max_rate is not None:
        filters.append(Property.base_rate <= max_rate)

    count_query = select(func.count()).select_from(Property).where(*filters)
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    items_query = select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    """Retrieve a single property. Returns 404 if not found."""
    prop = await _get_property_or_404(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed.

    Rate changes apply to future price quotes and bookings; existing
    bookings keep the amounts they were priced at.
    """
    prop = await _get_property_or_404(db, property_id)

    update_data = body.model_dump(exclude_unset=True)
    min_stay = update_data.get("min_stay", prop.min_stay)
    max_stay = update_data.get("max_stay", prop.max_stay)
    if max_stay is not None and min_stay is not None and max_stay < min_stay:
        raise HTTPException(
            status_code=422,
            detail="max_stay must be greater than or equal to min_stay",
        )

    for field, value in update_data.items():
        setattr(prop, field, value)

    db.add(prop)
    await db.flush()
    await db.refresh(prop)

    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a property with its bookings and maintenance logs. Its tasks are kept and unlinked."""
    prop = await _get_property_or_404(db, property_id)
    await db.refresh(prop, attribute_names=["bookings", "maintenance_logs"])
    await db.execute(update(TeamTask).where(TeamTask.property_id == property_id).values(property_id=None))

    await db.delete(prop)
    await db.flush()

    return MessageResponse(message="Property deleted")


# ---------------------------------------------------------------------------
# Availability, pricing, calendar
# ---------------------------------------------------------------------------


@router.get(
    "/{property_id}/availability",
    response_model=AvailabilityResponse | AvailableDatesResponse,
    summary="Check availability or list free dates",
)
async def get_availability(
    property_id: uuid.UUID,
    check_in: date | None = Query(None, description="Check a specific stay (requires check_out)"),
    check_out: date | None = Query(None),
    start_date: date | None = Query(None, description="First date of the free-date horizon (default today)"),
    days: int | None = Query(None, ge=1, le=settings.max_availability_days),
    db: AsyncSession = Depends(get_db),
    engine: BookingEngine = Depends(get_booking_engine),
) -> AvailabilityResponse | AvailableDatesResponse:
    """With both ``check_in`` and ``check_out``, report whether that stay is free.

    Otherwise list every free date from ``start_date`` over the next ``days``
    days (defaults: today and ``DEFAULT_AVAILABILITY_DAYS``).
    """
    await _get_property_or_404(db, property_id)

    try:
        if check_in is not None and check_out is not None:
            is_available = await engine.check_availability(property_id, check_in, check_out)
            return AvailabilityResponse(
                property_id=property_id,
                check_in=check_in,
                check_out=check_out,
                is_available=is_available,
            )

        start = start_date or date.today()
        horizon = days or settings.default_availability_days
        available_dates = await engine.get_available_dates(property_id, start, horizon)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    return AvailableDatesResponse(
        property_id=property_id,
        start_date=start,
        days=horizon,
        available_dates=available_dates,
    )


@router.get(
    "/{property_id}/price",
    response_model=PriceQuoteResponse,
    summary="Quote the price of a stay",
)
async def get_price_quote(
    property_id: uuid.UUID,
    check_in: date = Query(...),
    check_out: date = Query(...),
    guests: int = Query(1, ge=1),
    engine: BookingEngine = Depends(get_booking_engine),
) -> PriceQuoteResponse:
    """Return nights, base amount, cleaning fee, service fee, and total."""
    try:
        pricing = await engine.calculate_booking_price(property_id, check_in, check_out, guests)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    return PriceQuoteResponse(
        property_id=property_id,
        check_in=check_in,
        check_out=check_out,
        number_of_guests=guests,
        currency=settings.currency,
        **pricing.as_dict(),
    )


@router.get(
    "/{property_id}/calendar",
    response_model=CalendarResponse,
    summary="Bookings for a calendar month",
)
async def get_calendar(
    property_id: uuid.UUID,
    year: int | None = Query(None, ge=1, le=9998),
    month: int | None = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    engine: BookingEngine = Depends(get_booking_engine),
) -> CalendarResponse:
    """List non-cancelled bookings touching the month (default: current month)."""
    await _get_property_or_404(db, property_id)

    today = date.today()
    year = year or today.year
    month = month or today.month
    try:
        bookings = await engine.get_booking_calendar(property_id, year, month)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    return CalendarResponse(
        property_id=property_id,
        year=year,
        month=month,
        bookings=[BookingResponse.model_validate(b) for b in bookings],
    )


@router.get(
    "/{property_id}/bookings",
    response_model=BookingListResponse,
    summary="All bookings of a property",
)
async def list_property_bookings(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> BookingListResponse:
    """Every booking of the property, cancelled ones included, newest check-in first."""
    await _get_property_or_404(db, property_id)

    result = await db.execute(
        select(Booking).where(Booking.property_id == property_id).order_by(Booking.check_in.desc())
    )
    items = list(result.scalars().all())
    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in items],
        total=len(items),
    )

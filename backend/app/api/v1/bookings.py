"""Bookings API router.

Creation and edits go through ``app.services.booking_service``, which checks
availability and prices the stay. Deleting a booking cancels it; the record
is kept for history but no longer blocks the property's calendar.
"""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_db
from app.api.errors import to_http_exception
from app.models.booking import Booking
from app.repositories.booking_repository import apply_booking_filter
from app.schemas.booking import (
    BookingCancel,
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from app.schemas.common import MessageResponse
from app.services import booking_service
from app.services.booking_engine import BookingFilter
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Create a booking from the booking form.

    Validates that:
    - The property exists and accepts bookings.
    - The guest count and stay length fit the property's limits.
    - No active booking overlaps the requested dates.

    The stay is priced server-side and the booking starts as pending/unpaid.
    """
    try:
        return await booking_service.create_booking(db, body)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List bookings",
)
async def list_bookings(
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    payment_status: str | None = Query(None, description="Filter by payment status"),
    guest_email: str | None = Query(None, description="Filter by guest email"),
    start_date: date | None = Query(None, description="Bookings with check_in >= this date"),
    end_date: date | None = Query(None, description="Bookings with check_out <= this date"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a paginated list of bookings, newest first."""
    try:
        booking_filter = BookingFilter(
            property_id=property_id,
            status=status_filter,
            payment_status=payment_status,
            guest_email=guest_email,
            check_in_from=start_date,
            check_out_to=end_date,
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    count_query = apply_booking_filter(select(func.count()).select_from(Booking), booking_filter)
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    items_query = (
        apply_booking_filter(select(Booking), booking_filter)
        .order_by(Booking.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return {"items": items, "total": total}


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get booking detail with nested property",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Retrieve a single booking with its property."""
    result = await db.execute(
        select(Booking).options(selectinload(Booking.property)).where(Booking.id == booking_id)
    )
    booking = result.scalar_one_or_none()

    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Partially update a booking.

    Changing dates re-runs the availability check (ignoring this booking)
    and re-prices the stay; changing the guest count re-validates it against
    the property limit and re-prices.
    """
    try:
        return await booking_service.update_booking(db, booking_id, body)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    summary="Cancel a booking",
)
async def delete_booking(
    booking_id: uuid.UUID,
    body: BookingCancel | None = Body(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Soft-delete: mark the booking cancelled instead of removing it."""
    try:
        await booking_service.cancel_booking(db, booking_id, reason=body.reason if body else None)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return {"message": "Booking cancelled"}


# ---------------------------------------------------------------------------
# Lifecycle transitions
# ---------------------------------------------------------------------------


@router.post("/{booking_id}/confirm", response_model=BookingResponse, summary="Confirm a pending booking")
async def confirm_booking(booking_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> Booking:
    try:
        return await booking_service.confirm_booking(db, booking_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{booking_id}/check-in", response_model=BookingResponse, summary="Check a guest in")
async def check_in_booking(booking_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> Booking:
    try:
        return await booking_service.check_in_booking(db, booking_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{booking_id}/check-out", response_model=BookingResponse, summary="Check a guest out")
async def check_out_booking(booking_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> Booking:
    try:
        return await booking_service.check_out_booking(db, booking_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{booking_id}/cancel", response_model=BookingResponse, summary="Cancel a booking")
async def cancel_booking(
    booking_id: uuid.UUID,
    body: BookingCancel | None = Body(None),
    db: AsyncSession = Depends(get_db),
) -> Booking:
    """Cancel with an optional reason. The record is kept."""
    try:
        return await booking_service.cancel_booking(db, booking_id, reason=body.reason if body else None)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

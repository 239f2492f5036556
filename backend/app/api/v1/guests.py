"""Guests CRUD API router.

Guests are also created implicitly when a booking is made with an email
address that is not on file yet.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models.booking import Booking
from app.models.guest import Guest
from app.schemas.booking import BookingListResponse, BookingResponse
from app.schemas.common import MessageResponse
from app.schemas.guest import (
    GuestCreate,
    GuestListResponse,
    GuestResponse,
    GuestUpdate,
)

router = APIRouter(prefix="/api/v1/guests", tags=["guests"])


async def _get_guest_or_404(db: AsyncSession, guest_id: uuid.UUID) -> Guest:
    result = await db.execute(select(Guest).where(Guest.id == guest_id))
    guest = result.scalar_one_or_none()

    if guest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found",
        )
    return guest


@router.post(
    "",
    response_model=GuestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new guest",
)
async def create_guest(
    body: GuestCreate,
    db: AsyncSession = Depends(get_db),
) -> Guest:
    """Create a new guest record.

    Raises 409 if a guest with the same email already exists.
    """
    existing = await db.execute(select(Guest).where(Guest.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Guest with this email already exists",
        )

    guest = Guest(**body.model_dump())
    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    return guest


@router.get(
    "",
    response_model=GuestListResponse,
    summary="List guests with optional search",
)
async def list_guests(
    search: str | None = Query(None, description="Search by name or email (case-insensitive)"),
    blacklisted: bool | None = Query(None, description="Filter by blacklist flag"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a paginated list of guests."""
    base_filter = []

    if search:
        search_pattern = f"%{search}%"
        base_filter.append(
            or_(
                Guest.name.ilike(search_pattern),
                Guest.email.ilike(search_pattern),
            )
        )
    if blacklisted is not None:
        base_filter.append(Guest.is_blacklisted.is_(blacklisted))

    count_query = select(func.count()).select_from(Guest).where(*base_filter)
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    items_query = (
        select(Guest).where(*base_filter).offset(skip).limit(limit).order_by(Guest.created_at.desc())
    )
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return {"items": items, "total": total}


@router.get(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Get a guest by ID",
)
async def get_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Guest:
    """Return a single guest by UUID."""
    return await _get_guest_or_404(db, guest_id)


@router.get(
    "/{guest_id}/bookings",
    response_model=BookingListResponse,
    summary="Booking history of a guest",
)
async def list_guest_bookings(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> BookingListResponse:
    """Every booking linked to the guest, newest check-in first."""
    await _get_guest_or_404(db, guest_id)

    result = await db.execute(
        select(Booking).where(Booking.guest_id == guest_id).order_by(Booking.check_in.desc())
    )
    items = list(result.scalars().all())
    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in items],
        total=len(items),
    )


@router.put(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Update a guest",
)
async def update_guest(
    guest_id: uuid.UUID,
    body: GuestUpdate,
    db: AsyncSession = Depends(get_db),
) -> Guest:
    """Partially update a guest. Only explicitly provided fields are changed.

    If the email is being changed, checks it is not taken by another guest.
    """
    guest = await _get_guest_or_404(db, guest_id)

    update_data = body.model_dump(exclude_unset=True)

    if "email" in update_data and update_data["email"] != guest.email:
        existing = await db.execute(
            select(Guest).where(
                Guest.email == update_data["email"],
                Guest.id != guest_id,
            )
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Guest with this email already exists",
            )

    for field, value in update_data.items():
        setattr(guest, field, value)

    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    return guest


@router.delete(
    "/{guest_id}",
    response_model=MessageResponse,
    summary="Delete a guest",
)
async def delete_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a guest by UUID. Their bookings are kept and unlinked; their messages go."""
    guest = await _get_guest_or_404(db, guest_id)
    # Reload so every linked booking gets its guest_id cleared on flush
    await db.refresh(guest, attribute_names=["bookings", "messages"])

    await db.delete(guest)
    await db.flush()
    return {"message": "Guest deleted"}

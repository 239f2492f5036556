"""Shared API dependencies, the single import point for all routers.

Re-exports the database session dependency and builds a per-request booking
engine so that router modules can import everything they need from one
place::

    from app.api.deps import get_booking_engine, get_db
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.booking_engine import BookingEngine
from app.services.booking_service import build_engine


async def get_booking_engine(db: AsyncSession = Depends(get_db)) -> BookingEngine:
    """Return a booking engine bound to the request's database session."""
    return build_engine(db)


__all__ = [
    "get_db",
    "get_booking_engine",
]

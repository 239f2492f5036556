"""Pydantic v2 request/response schemas for guest endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from app.schemas.common import reject_explicit_nulls

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestCreate(BaseModel):
    """Schema for creating a new guest."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    address: str | None = None
    id_type: str | None = Field(None, pattern="^(passport|drivers_license|national_id)$")
    id_number: str | None = Field(None, max_length=100)
    date_of_birth: date | None = None
    nationality: str | None = Field("Nigeria", max_length=100)
    notes: str | None = None


class GuestUpdate(BaseModel):
    """Schema for partially updating a guest. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=50)
    address: str | None = None
    id_type: str | None = Field(None, pattern="^(passport|drivers_license|national_id)$")
    id_number: str | None = Field(None, max_length=100)
    date_of_birth: date | None = None
    nationality: str | None = Field(None, max_length=100)
    is_blacklisted: bool | None = None
    blacklist_reason: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "GuestUpdate":
        reject_explicit_nulls(self, ("name", "email", "phone", "is_blacklisted"))
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GuestResponse(BaseModel):
    """Guest information returned by the API."""

    id: uuid.UUID
    name: str
    email: str
    phone: str
    address: str | None = None
    id_type: str | None = None
    id_number: str | None = None
    date_of_birth: date | None = None
    nationality: str | None = None
    total_bookings: int
    total_spent: Decimal
    is_blacklisted: bool
    blacklist_reason: str | None = None
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestListResponse(BaseModel):
    """Paginated list of guests."""

    items: list[GuestResponse]
    total: int

"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.common import reject_explicit_nulls

_TYPE_PATTERN = "^(apartment|villa|house|studio|penthouse)$"
_STATUS_PATTERN = "^(available|occupied|maintenance|inactive)$"
_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_NULLABLE_PROPERTY_FIELDS = frozenset(
    {"description", "address", "weekend_rate", "weekly_rate", "monthly_rate", "amenities", "rules", "max_stay"}
)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    name: str = Field(..., min_length=3, max_length=200)
    description: str | None = None
    property_type: str = Field("apartment", pattern=_TYPE_PATTERN)
    location: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field("Nigeria", max_length=100)
    bedrooms: int = Field(1, ge=0)
    bathrooms: int = Field(1, ge=0)
    max_guests: int = Field(2, ge=1)
    base_rate: Decimal = Field(..., ge=0)
    weekend_rate: Decimal | None = Field(None, ge=0)
    weekly_rate: Decimal | None = Field(None, ge=0)
    monthly_rate: Decimal | None = Field(None, ge=0)
    cleaning_fee: Decimal = Field(Decimal("0"), ge=0)
    security_deposit: Decimal = Field(Decimal("0"), ge=0)
    status: str = Field("available", pattern=_STATUS_PATTERN)
    amenities: list[str] = Field(default_factory=list)
    rules: str | None = None
    check_in_time: str = Field("14:00", pattern=_TIME_PATTERN)
    check_out_time: str = Field("11:00", pattern=_TIME_PATTERN)
    min_stay: int = Field(1, ge=1)
    max_stay: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def check_stay_limits(self) -> "PropertyCreate":
        """Validate that max_stay is not below min_stay."""
        if self.max_stay is not None and self.max_stay < self.min_stay:
            raise ValueError("max_stay must be greater than or equal to min_stay")
        return self


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    name: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = None
    property_type: str | None = Field(None, pattern=_TYPE_PATTERN)
    location: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = None
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    country: str | None = Field(None, max_length=100)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    max_guests: int | None = Field(None, ge=1)
    base_rate: Decimal | None = Field(None, ge=0)
    weekend_rate: Decimal | None = Field(None, ge=0)
    weekly_rate: Decimal | None = Field(None, ge=0)
    monthly_rate: Decimal | None = Field(None, ge=0)
    cleaning_fee: Decimal | None = Field(None, ge=0)
    security_deposit: Decimal | None = Field(None, ge=0)
    status: str | None = Field(None, pattern=_STATUS_PATTERN)
    amenities: list[str] | None = None
    rules: str | None = None
    check_in_time: str | None = Field(None, pattern=_TIME_PATTERN)
    check_out_time: str | None = Field(None, pattern=_TIME_PATTERN)
    min_stay: int | None = Field(None, ge=1)
    max_stay: int | None = Field(None, ge=1)
    is_active: bool | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "PropertyUpdate":
        """Only the optional columns may be cleared with an explicit null."""
        reject_explicit_nulls(self, set(PropertyUpdate.model_fields) - _NULLABLE_PROPERTY_FIELDS)
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Property information returned from the API."""

    id: uuid.UUID
    name: str
    description: str | None = None
    property_type: str
    location: str
    address: str | None = None
    city: str
    state: str
    country: str
    bedrooms: int
    bathrooms: int
    max_guests: int
    base_rate: Decimal
    weekend_rate: Decimal | None = None
    weekly_rate: Decimal | None = None
    monthly_rate: Decimal | None = None
    cleaning_fee: Decimal
    security_deposit: Decimal
    status: str
    amenities: list | None = None
    rules: str | None = None
    check_in_time: str
    check_out_time: str
    min_stay: int
    max_stay: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int

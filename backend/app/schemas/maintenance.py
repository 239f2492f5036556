"""Pydantic v2 request/response schemas for maintenance endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.common import reject_explicit_nulls

_CATEGORY_PATTERN = "^(plumbing|electrical|cleaning|repair|inspection|other)$"
_PRIORITY_PATTERN = "^(low|medium|high|urgent)$"
_STATUS_PATTERN = "^(pending|in_progress|completed|cancelled)$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class MaintenanceLogCreate(BaseModel):
    """Schema for logging maintenance work on a property."""

    property_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str = Field("other", pattern=_CATEGORY_PATTERN)
    priority: str = Field("medium", pattern=_PRIORITY_PATTERN)
    status: str = Field("pending", pattern=_STATUS_PATTERN)
    assigned_to: uuid.UUID | None = None
    cost: Decimal | None = Field(None, ge=0)
    scheduled_date: date | None = None
    completed_date: date | None = None
    notes: str | None = None
    images: list[str] = Field(default_factory=list)


class MaintenanceLogUpdate(BaseModel):
    """Schema for partially updating a maintenance log. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(None, pattern=_CATEGORY_PATTERN)
    priority: str | None = Field(None, pattern=_PRIORITY_PATTERN)
    status: str | None = Field(None, pattern=_STATUS_PATTERN)
    assigned_to: uuid.UUID | None = None
    cost: Decimal | None = Field(None, ge=0)
    scheduled_date: date | None = None
    completed_date: date | None = None
    notes: str | None = None
    images: list[str] | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "MaintenanceLogUpdate":
        reject_explicit_nulls(self, ("title", "category", "priority", "status"))
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MaintenanceLogResponse(BaseModel):
    """Maintenance log returned by the API."""

    id: uuid.UUID
    property_id: uuid.UUID
    title: str
    description: str | None = None
    category: str
    priority: str
    status: str
    assigned_to: uuid.UUID | None = None
    cost: Decimal | None = None
    scheduled_date: date | None = None
    completed_date: date | None = None
    notes: str | None = None
    images: list | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MaintenanceLogListResponse(BaseModel):
    """Paginated list of maintenance logs."""

    items: list[MaintenanceLogResponse]
    total: int


class MaintenanceCategory(BaseModel):
    """A maintenance category with its display name and icon."""

    id: str
    name: str
    icon: str

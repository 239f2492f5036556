"""Pydantic v2 request/response schemas for guest communication endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.common import reject_explicit_nulls

_CATEGORY_PATTERN = "^(booking_confirmation|check_in|check_out|thank_you|custom)$"
_TRIGGER_PATTERN = "^(booking_confirmed|check_in_24h|check_in_day|check_out_24h|check_out_complete)$"

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class MessageTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    subject: str | None = Field(None, max_length=255)
    message: str = Field(..., min_length=1)
    category: str = Field("custom", pattern=_CATEGORY_PATTERN)
    is_active: bool = True


class MessageTemplateUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    subject: str | None = Field(None, max_length=255)
    message: str | None = Field(None, min_length=1)
    category: str | None = Field(None, pattern=_CATEGORY_PATTERN)
    is_active: bool | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "MessageTemplateUpdate":
        reject_explicit_nulls(self, ("name", "message", "category", "is_active"))
        return self


class MessageTemplateResponse(BaseModel):
    id: uuid.UUID
    name: str
    subject: str | None = None
    message: str
    category: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageTemplateListResponse(BaseModel):
    items: list[MessageTemplateResponse]
    total: int


# ---------------------------------------------------------------------------
# Automations
# ---------------------------------------------------------------------------


class MessageAutomationCreate(BaseModel):
    """Send ``template_id`` whenever ``trigger`` fires for a booking."""

    name: str = Field(..., min_length=1, max_length=255)
    trigger: str = Field(..., pattern=_TRIGGER_PATTERN)
    template_id: uuid.UUID
    is_active: bool = True


class MessageAutomationResponse(BaseModel):
    id: uuid.UUID
    name: str
    trigger: str
    template_id: uuid.UUID
    is_active: bool
    template: MessageTemplateResponse
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageAutomationListResponse(BaseModel):
    items: list[MessageAutomationResponse]
    total: int


# ---------------------------------------------------------------------------
# Guest messages
# ---------------------------------------------------------------------------


class GuestMessageCreate(BaseModel):
    subject: str | None = Field(None, max_length=255)
    message: str = Field(..., min_length=1)


class GuestMessageResponse(BaseModel):
    id: uuid.UUID
    guest_id: uuid.UUID
    subject: str | None = None
    message: str
    direction: str
    status: str
    sent_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestMessageListResponse(BaseModel):
    items: list[GuestMessageResponse]
    total: int

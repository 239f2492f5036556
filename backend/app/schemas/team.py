"""Pydantic v2 request/response schemas for team members and tasks."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from app.schemas.common import reject_explicit_nulls

_MEMBER_STATUS_PATTERN = "^(active|inactive|on_leave)$"
_PRIORITY_PATTERN = "^(low|medium|high|urgent)$"
_TASK_STATUS_PATTERN = "^(pending|in_progress|completed|cancelled)$"

# ---------------------------------------------------------------------------
# Team members
# ---------------------------------------------------------------------------


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    role: str = Field("Staff", min_length=1, max_length=100)
    assigned_properties: list[uuid.UUID] = Field(default_factory=list)
    status: str = Field("active", pattern=_MEMBER_STATUS_PATTERN)
    hire_date: date | None = None
    notes: str | None = None


class TeamMemberUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    role: str | None = Field(None, min_length=1, max_length=100)
    assigned_properties: list[uuid.UUID] | None = None
    status: str | None = Field(None, pattern=_MEMBER_STATUS_PATTERN)
    hire_date: date | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "TeamMemberUpdate":
        reject_explicit_nulls(self, ("name", "email", "role", "status"))
        return self


class TeamMemberResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    role: str
    assigned_properties: list | None = None
    status: str
    hire_date: date | None = None
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TeamMemberListResponse(BaseModel):
    items: list[TeamMemberResponse]
    total: int


class TeamRole(BaseModel):
    """A predefined role and the permissions it implies."""

    id: int
    name: str
    permissions: list[str]


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TeamTaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    assigned_to: uuid.UUID | None = None
    property_id: uuid.UUID | None = None
    priority: str = Field("medium", pattern=_PRIORITY_PATTERN)
    status: str = Field("pending", pattern=_TASK_STATUS_PATTERN)
    due_date: date | None = None


class TeamTaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    assigned_to: uuid.UUID | None = None
    property_id: uuid.UUID | None = None
    priority: str | None = Field(None, pattern=_PRIORITY_PATTERN)
    status: str | None = Field(None, pattern=_TASK_STATUS_PATTERN)
    due_date: date | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "TeamTaskUpdate":
        reject_explicit_nulls(self, ("title", "priority", "status"))
        return self


class TeamTaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    assigned_to: uuid.UUID | None = None
    property_id: uuid.UUID | None = None
    priority: str
    status: str
    due_date: date | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TeamTaskListResponse(BaseModel):
    items: list[TeamTaskResponse]
    total: int

"""Team API router: staff members, their roles, and the task board."""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models.maintenance import MaintenanceLog
from app.models.property import Property
from app.models.team import TeamMember, TeamTask
from app.schemas.common import MessageResponse
from app.schemas.team import (
    TeamMemberCreate,
    TeamMemberListResponse,
    TeamMemberResponse,
    TeamMemberUpdate,
    TeamRole,
    TeamTaskCreate,
    TeamTaskListResponse,
    TeamTaskResponse,
    TeamTaskUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/team", tags=["team"])

ROLES = [
    TeamRole(id=1, name="Property Manager", permissions=["manage_properties", "manage_bookings", "manage_team", "manage_guests"]),
    TeamRole(id=2, name="Assistant Manager", permissions=["manage_properties", "manage_bookings", "manage_guests"]),
    TeamRole(id=3, name="Cleaner", permissions=["view_properties", "update_cleaning_status"]),
    TeamRole(id=4, name="Maintenance", permissions=["view_properties", "update_maintenance"]),
    TeamRole(id=5, name="Guest Concierge", permissions=["view_properties", "message_guests"]),
    TeamRole(id=6, name="Security", permissions=["view_properties"]),
    TeamRole(id=7, name="Staff", permissions=["view_properties"]),
]


async def _get_member_or_404(db: AsyncSession, member_id: uuid.UUID) -> TeamMember:
    member = await db.get(TeamMember, member_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Team member not found",
        )
    return member


async def _get_task_or_404(db: AsyncSession, task_id: uuid.UUID) -> TeamTask:
    task = await db.get(TeamTask, task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


async def _check_task_links(db: AsyncSession, data: dict) -> None:
    """404 when the task points at a team member or property that does not exist."""
    if data.get("assigned_to") is not None:
        await _get_member_or_404(db, data["assigned_to"])
    if data.get("property_id") is not None and await db.get(Property, data["property_id"]) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )


def _member_values(data: dict) -> dict:
    # JSON column: store property ids as strings
    if data.get("assigned_properties") is not None:
        data["assigned_properties"] = [str(p) for p in data["assigned_properties"]]
    return data


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@router.get("/roles", response_model=list[TeamRole], summary="List team roles")
async def list_roles() -> list[TeamRole]:
    return ROLES


@router.post(
    "/members",
    response_model=TeamMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a team member",
)
async def create_member(
    body: TeamMemberCreate,
    db: AsyncSession = Depends(get_db),
) -> TeamMember:
    member = TeamMember(**_member_values(body.model_dump()))
    db.add(member)
    await db.flush()
    await db.refresh(member)

    logger.info("Team member created: %s (%s)", member.id, member.role)
    return member


@router.get("/members", response_model=TeamMemberListResponse, summary="List team members")
async def list_members(
    status_filter: str | None = Query(None, alias="status", description="Filter by member status"),
    role: str | None = Query(None, description="Filter by role"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    filters = []
    if status_filter is not None:
        filters.append(TeamMember.status == status_filter)
    if role is not None:
        filters.append(TeamMember.role == role)

    result = await db.execute(select(TeamMember).where(*filters).order_by(TeamMember.created_at.desc()))
    items = list(result.scalars().all())
    return {"items": items, "total": len(items)}


@router.get("/members/{member_id}", response_model=TeamMemberResponse, summary="Get a team member")
async def get_member(
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> TeamMember:
    return await _get_member_or_404(db, member_id)


@router.put("/members/{member_id}", response_model=TeamMemberResponse, summary="Update a team member")
async def update_member(
    member_id: uuid.UUID,
    body: TeamMemberUpdate,
    db: AsyncSession = Depends(get_db),
) -> TeamMember:
    member = await _get_member_or_404(db, member_id)

    for field, value in _member_values(body.model_dump(exclude_unset=True)).items():
        setattr(member, field, value)

    db.add(member)
    await db.flush()
    await db.refresh(member)
    return member


@router.delete("/members/{member_id}", response_model=MessageResponse, summary="Remove a team member")
async def delete_member(
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Remove the member. Their tasks and maintenance logs become unassigned."""
    member = await _get_member_or_404(db, member_id)

    await db.execute(update(TeamTask).where(TeamTask.assigned_to == member_id).values(assigned_to=None))
    await db.execute(
        update(MaintenanceLog).where(MaintenanceLog.assigned_to == member_id).values(assigned_to=None)
    )
    await db.delete(member)
    await db.flush()

    logger.info("Team member deleted: %s", member_id)
    return {"message": "Team member deleted"}


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@router.post(
    "/tasks",
    response_model=TeamTaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    body: TeamTaskCreate,
    db: AsyncSession = Depends(get_db),
) -> TeamTask:
    data = body.model_dump()
    await _check_task_links(db, data)

    task = TeamTask(**data)
    if task.status == "completed":
        task.completed_at = datetime.now(timezone.utc)
    db.add(task)
    await db.flush()
    await db.refresh(task)

    logger.info("Task created: %s", task.id)
    return task


@router.get("/tasks", response_model=TeamTaskListResponse, summary="List tasks")
async def list_tasks(
    status_filter: str | None = Query(None, alias="status", description="Filter by task status"),
    priority: str | None = Query(None, description="Filter by priority"),
    assigned_to: uuid.UUID | None = Query(None, description="Filter by team member"),
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    filters = []
    if status_filter is not None:
        filters.append(TeamTask.status == status_filter)
    if priority is not None:
        filters.append(TeamTask.priority == priority)
    if assigned_to is not None:
        filters.append(TeamTask.assigned_to == assigned_to)
    if property_id is not None:
        filters.append(TeamTask.property_id == property_id)

    count_result = await db.execute(select(func.count()).select_from(TeamTask).where(*filters))
    result = await db.execute(select(TeamTask).where(*filters).order_by(TeamTask.created_at.desc()))
    return {"items": list(result.scalars().all()), "total": count_result.scalar_one()}


@router.put("/tasks/{task_id}", response_model=TeamTaskResponse, summary="Update a task")
async def update_task(
    task_id: uuid.UUID,
    body: TeamTaskUpdate,
    db: AsyncSession = Depends(get_db),
) -> TeamTask:
    """Partially update a task. Completing it stamps ``completed_at`` once."""
    task = await _get_task_or_404(db, task_id)
    update_data = body.model_dump(exclude_unset=True)
    await _check_task_links(db, update_data)

    if update_data.get("status") == "completed" and task.completed_at is None:
        update_data["completed_at"] = datetime.now(timezone.utc)

    for field, value in update_data.items():
        setattr(task, field, value)

    db.add(task)
    await db.flush()
    await db.refresh(task)
    return task


@router.delete("/tasks/{task_id}", response_model=MessageResponse, summary="Delete a task")
async def delete_task(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    task = await _get_task_or_404(db, task_id)

    await db.delete(task)
    await db.flush()
    return {"message": "Task deleted"}

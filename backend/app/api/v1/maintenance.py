"""Maintenance API router: maintenance logs per property plus the category list.

Writes go through ``app.services.maintenance_service``, which keeps the
property's ``maintenance`` status in step with its in-progress work.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.api.errors import to_http_exception
from app.models.maintenance import MaintenanceLog
from app.schemas.common import MessageResponse
from app.schemas.maintenance import (
    MaintenanceCategory,
    MaintenanceLogCreate,
    MaintenanceLogListResponse,
    MaintenanceLogResponse,
    MaintenanceLogUpdate,
)
from app.services import maintenance_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])

CATEGORIES = [
    MaintenanceCategory(id="plumbing", name="Plumbing", icon="wrench"),
    MaintenanceCategory(id="electrical", name="Electrical", icon="bolt"),
    MaintenanceCategory(id="cleaning", name="Cleaning", icon="spray-can"),
    MaintenanceCategory(id="repair", name="Repair", icon="screwdriver"),
    MaintenanceCategory(id="inspection", name="Inspection", icon="clipboard-check"),
    MaintenanceCategory(id="other", name="Other", icon="circle-question"),
]


@router.get(
    "/categories",
    response_model=list[MaintenanceCategory],
    summary="List maintenance categories",
)
async def list_categories() -> list[MaintenanceCategory]:
    return CATEGORIES


@router.post(
    "/logs",
    response_model=MaintenanceLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a maintenance log",
)
async def create_log(
    body: MaintenanceLogCreate,
    db: AsyncSession = Depends(get_db),
) -> MaintenanceLog:
    """Log work on a property. Returns 404 for an unknown property or assignee."""
    try:
        return await maintenance_service.create_log(db, body)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get(
    "/logs",
    response_model=MaintenanceLogListResponse,
    summary="List maintenance logs",
)
async def list_logs(
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    category: str | None = Query(None, description="Filter by category"),
    status_filter: str | None = Query(None, alias="status", description="Filter by status"),
    priority: str | None = Query(None, description="Filter by priority"),
    assigned_to: uuid.UUID | None = Query(None, description="Filter by team member"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a paginated list of maintenance logs, newest first."""
    filters = []
    if property_id is not None:
        filters.append(MaintenanceLog.property_id == property_id)
    if category is not None:
        filters.append(MaintenanceLog.category == category)
    if status_filter is not None:
        filters.append(MaintenanceLog.status == status_filter)
    if priority is not None:
        filters.append(MaintenanceLog.priority == priority)
    if assigned_to is not None:
        filters.append(MaintenanceLog.assigned_to == assigned_to)

    total_result = await db.execute(select(func.count()).select_from(MaintenanceLog).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(MaintenanceLog).where(*filters).order_by(MaintenanceLog.created_at.desc()).offset(skip).limit(limit)
    )
    return {"items": list(result.scalars().all()), "total": total}


@router.get(
    "/logs/{log_id}",
    response_model=MaintenanceLogResponse,
    summary="Get a maintenance log",
)
async def get_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MaintenanceLog:
    try:
        return await maintenance_service.get_log(db, log_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put(
    "/logs/{log_id}",
    response_model=MaintenanceLogResponse,
    summary="Update a maintenance log",
)
async def update_log(
    log_id: uuid.UUID,
    body: MaintenanceLogUpdate,
    db: AsyncSession = Depends(get_db),
) -> MaintenanceLog:
    """Partially update a log. Marking it completed stamps today's date."""
    try:
        return await maintenance_service.update_log(db, log_id, body)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.delete(
    "/logs/{log_id}",
    response_model=MessageResponse,
    summary="Delete a maintenance log",
)
async def delete_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    try:
        await maintenance_service.delete_log(db, log_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return {"message": "Maintenance log deleted"}

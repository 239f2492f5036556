"""Maintenance logs and the property status they drive.

A property with at least one ``in_progress`` log is shown as under
``maintenance``; once the last one is completed or cancelled it returns to
``available``. Properties a host marked ``occupied`` or ``inactive`` are left
alone.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.maintenance import MaintenanceLog
from app.models.property import Property
from app.models.team import TeamMember
from app.schemas.maintenance import MaintenanceLogCreate, MaintenanceLogUpdate
from app.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

ACTIVE_WORK_STATUS = "in_progress"
_SYNCED_PROPERTY_STATUSES = frozenset({"available", "maintenance"})


async def sync_property_status(db: AsyncSession, property_id: uuid.UUID) -> Property | None:
    """Set the property to ``maintenance`` or back to ``available`` from its open logs."""
    prop = await db.get(Property, property_id)
    if prop is None or prop.status not in _SYNCED_PROPERTY_STATUSES:
        return prop

    result = await db.execute(
        select(func.count())
        .select_from(MaintenanceLog)
        .where(MaintenanceLog.property_id == property_id, MaintenanceLog.status == ACTIVE_WORK_STATUS)
    )
    target = "maintenance" if result.scalar_one() > 0 else "available"
    if prop.status != target:
        logger.info("Property %s status %s -> %s", prop.id, prop.status, target)
        prop.status = target
    return prop


async def _require_member(db: AsyncSession, member_id: uuid.UUID | None) -> None:
    if member_id is not None and await db.get(TeamMember, member_id) is None:
        raise NotFoundError("Team member", member_id)


async def get_log(db: AsyncSession, log_id: uuid.UUID) -> MaintenanceLog:
    log = await db.get(MaintenanceLog, log_id)
    if log is None:
        raise NotFoundError("Maintenance log", log_id)
    return log


async def create_log(db: AsyncSession, data: MaintenanceLogCreate) -> MaintenanceLog:
    """Record maintenance work for an existing property."""
    if await db.get(Property, data.property_id) is None:
        raise NotFoundError("Property", data.property_id)
    await _require_member(db, data.assigned_to)

    log = MaintenanceLog(**data.model_dump())
    if log.status == "completed" and log.completed_date is None:
        log.completed_date = date.today()
    db.add(log)
    await db.flush()

    await sync_property_status(db, log.property_id)
    await db.flush()
    await db.refresh(log)

    logger.info("Maintenance log created: %s (%s) for property %s", log.id, log.category, log.property_id)
    return log


async def update_log(db: AsyncSession, log_id: uuid.UUID, data: MaintenanceLogUpdate) -> MaintenanceLog:
    """Partially update a log. Completing it stamps ``completed_date`` once."""
    log = await get_log(db, log_id)
    update_data = data.model_dump(exclude_unset=True)
    if "assigned_to" in update_data:
        await _require_member(db, update_data["assigned_to"])

    if update_data.get("status") == "completed" and log.completed_date is None:
        update_data.setdefault("completed_date", date.today())

    for field, value in update_data.items():
        setattr(log, field, value)

    db.add(log)
    await db.flush()
    await sync_property_status(db, log.property_id)
    await db.flush()
    await db.refresh(log)

    logger.info("Maintenance log updated: %s (status=%s)", log.id, log.status)
    return log


async def delete_log(db: AsyncSession, log_id: uuid.UUID) -> None:
    log = await get_log(db, log_id)
    property_id = log.property_id

    await db.delete(log)
    await db.flush()
    await sync_property_status(db, property_id)
    await db.flush()

    logger.info("Maintenance log deleted: %s", log_id)

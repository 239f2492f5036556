"""Guest communications API router.

Hosts keep reusable message templates, bind them to booking lifecycle
triggers through automations, and record the messages exchanged with each
guest. Sending the messages is left to an outside delivery service; this
router only stores them.
"""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models.communication import GuestMessage, MessageAutomation, MessageTemplate
from app.models.guest import Guest
from app.schemas.common import MessageResponse
from app.schemas.communication import (
    GuestMessageCreate,
    GuestMessageListResponse,
    GuestMessageResponse,
    MessageAutomationCreate,
    MessageAutomationListResponse,
    MessageAutomationResponse,
    MessageTemplateCreate,
    MessageTemplateListResponse,
    MessageTemplateResponse,
    MessageTemplateUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/communications", tags=["communications"])


def _not_found(resource: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


async def _get_template_or_404(db: AsyncSession, template_id: uuid.UUID) -> MessageTemplate:
    template = await db.get(MessageTemplate, template_id)
    if template is None:
        raise _not_found("Template")
    return template


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@router.get("/templates", response_model=MessageTemplateListResponse, summary="List message templates")
async def list_templates(
    category: str | None = Query(None, description="Filter by category"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    query = select(MessageTemplate).order_by(MessageTemplate.created_at.desc())
    if category is not None:
        query = query.where(MessageTemplate.category == category)

    result = await db.execute(query)
    items = list(result.scalars().all())
    return {"items": items, "total": len(items)}


@router.post(
    "/templates",
    response_model=MessageTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a message template",
)
async def create_template(
    body: MessageTemplateCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageTemplate:
    template = MessageTemplate(**body.model_dump())
    db.add(template)
    await db.flush()
    await db.refresh(template)

    logger.info("Template created: %s (%s)", template.id, template.category)
    return template


@router.get("/templates/{template_id}", response_model=MessageTemplateResponse, summary="Get a template")
async def get_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageTemplate:
    return await _get_template_or_404(db, template_id)


@router.put("/templates/{template_id}", response_model=MessageTemplateResponse, summary="Update a template")
async def update_template(
    template_id: uuid.UUID,
    body: MessageTemplateUpdate,
    db: AsyncSession = Depends(get_db),
) -> MessageTemplate:
    template = await _get_template_or_404(db, template_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(template, field, value)

    db.add(template)
    await db.flush()
    await db.refresh(template)
    return template


@router.delete("/templates/{template_id}", response_model=MessageResponse, summary="Delete a template")
async def delete_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a template together with the automations that use it."""
    template = await _get_template_or_404(db, template_id)
    await db.refresh(template, attribute_names=["automations"])

    await db.delete(template)
    await db.flush()

    logger.info("Template deleted: %s", template_id)
    return {"message": "Template deleted"}


# ---------------------------------------------------------------------------
# Automations
# ---------------------------------------------------------------------------


@router.get("/automations", response_model=MessageAutomationListResponse, summary="List automations")
async def list_automations(
    db: AsyncSession = Depends(get_db),
) -> dict:
    result = await db.execute(select(MessageAutomation).order_by(MessageAutomation.created_at.desc()))
    items = list(result.scalars().all())
    return {"items": items, "total": len(items)}


@router.post(
    "/automations",
    response_model=MessageAutomationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an automation",
)
async def create_automation(
    body: MessageAutomationCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageAutomation:
    template = await _get_template_or_404(db, body.template_id)

    automation = MessageAutomation(**body.model_dump())
    automation.template = template
    db.add(automation)
    await db.flush()
    await db.refresh(automation)

    logger.info("Automation created: %s on %s", automation.id, automation.trigger)
    return automation


@router.delete("/automations/{automation_id}", response_model=MessageResponse, summary="Delete an automation")
async def delete_automation(
    automation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    automation = await db.get(MessageAutomation, automation_id)
    if automation is None:
        raise _not_found("Automation")

    await db.delete(automation)
    await db.flush()
    return {"message": "Automation deleted"}


# ---------------------------------------------------------------------------
# Guest messages
# ---------------------------------------------------------------------------


@router.get(
    "/messages/{guest_id}",
    response_model=GuestMessageListResponse,
    summary="Conversation with a guest",
)
async def list_guest_messages(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Messages exchanged with the guest, oldest first."""
    if await db.get(Guest, guest_id) is None:
        raise _not_found("Guest")

    result = await db.execute(
        select(GuestMessage).where(GuestMessage.guest_id == guest_id).order_by(GuestMessage.created_at.asc())
    )
    items = list(result.scalars().all())
    return {"items": items, "total": len(items)}


@router.post(
    "/messages/{guest_id}",
    response_model=GuestMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a message to a guest",
)
async def send_guest_message(
    guest_id: uuid.UUID,
    body: GuestMessageCreate,
    db: AsyncSession = Depends(get_db),
) -> GuestMessage:
    if await db.get(Guest, guest_id) is None:
        raise _not_found("Guest")

    message = GuestMessage(
        guest_id=guest_id,
        subject=body.subject,
        message=body.message,
        direction="outgoing",
        status="sent",
        sent_at=datetime.now(timezone.utc),
    )
    db.add(message)
    await db.flush()
    await db.refresh(message)

    logger.info("Message recorded for guest %s", guest_id)
    return message

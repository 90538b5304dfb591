"""API routes for reusable guest response templates."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tablemate.api.dependencies import get_messaging_service, get_storage
from tablemate.models.schemas import (
    ResponseTemplateCreate,
    ResponseTemplateRead,
    ResponseTemplateUpdate,
    TemplateRenderRequest,
    TemplateRenderResponse,
)
from tablemate.services.messaging_service import MessagingService
from tablemate.services.repository import Storage

router = APIRouter(prefix="/response-templates", tags=["response-templates"])


@router.get("", response_model=List[ResponseTemplateRead])
async def list_templates(storage: Storage = Depends(get_storage)) -> List[ResponseTemplateRead]:
    return await storage.response_templates.list()


@router.post("", response_model=ResponseTemplateRead)
async def create_template(
    payload: ResponseTemplateCreate,
    storage: Storage = Depends(get_storage),
) -> ResponseTemplateRead:
    return await storage.response_templates.create(payload.model_dump())


@router.patch("/{template_id}", response_model=ResponseTemplateRead)
async def update_template(
    template_id: int,
    payload: ResponseTemplateUpdate,
    storage: Storage = Depends(get_storage),
) -> ResponseTemplateRead:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    template = await storage.response_templates.update(template_id, changes)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Response template not found")
    return template


@router.post("/{template_id}/render", response_model=TemplateRenderResponse)
async def render_template(
    template_id: int,
    payload: TemplateRenderRequest,
    storage: Storage = Depends(get_storage),
    messaging: MessagingService = Depends(get_messaging_service),
) -> TemplateRenderResponse:
    """Fill a template's placeholders from a reservation and/or explicit values."""
    template = await storage.response_templates.get(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Response template not found")

    reservation = None
    if payload.reservation_id is not None:
        reservation = await storage.reservations.get(payload.reservation_id)
        if reservation is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")

    message = messaging.render(template, payload.context, reservation)
    return TemplateRenderResponse(template_id=template.id, message=message)

"""API routes for table reservations."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tablemate.api.dependencies import get_reservation_service, get_storage
from tablemate.models.schemas import (
    ReservationConfirmation,
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
)
from tablemate.services.repository import Storage
from tablemate.services.reservation_service import ReservationService

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("", response_model=List[ReservationRead])
async def list_reservations(storage: Storage = Depends(get_storage)) -> List[ReservationRead]:
    return await storage.reservations.list()


@router.get("/today", response_model=List[ReservationRead])
async def todays_reservations(
    service: ReservationService = Depends(get_reservation_service),
) -> List[ReservationRead]:
    return await service.today()


@router.post("", response_model=ReservationConfirmation)
async def create_reservation(
    payload: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationConfirmation:
    """Book a table and return it with the guest confirmation message."""
    return await service.create(payload)


@router.patch("/{reservation_id}", response_model=ReservationRead)
async def update_reservation(
    reservation_id: int,
    payload: ReservationUpdate,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    reservation = await service.update(reservation_id, payload)
    if reservation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    return reservation

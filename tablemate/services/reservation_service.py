"""Reservation bookkeeping.

Creating a reservation also produces the confirmation message sent to the
guest. Updates are partial; moving a reservation into ``no-show`` bumps
its ``no_show_count`` by one, and the counter cannot be written directly.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from tablemate.models.enums import ReservationStatus
from tablemate.models.schemas import (
    ReservationConfirmation,
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
)
from tablemate.services.messaging_service import MessagingService
from tablemate.services.repository import Storage

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(self, storage: Storage, messaging: Optional[MessagingService] = None) -> None:
        self.storage = storage
        self.messaging = messaging or MessagingService()

    async def create(self, payload: ReservationCreate) -> ReservationConfirmation:
        data = payload.model_dump()
        data["no_show_count"] = 0
        reservation = await self.storage.reservations.create(data)
        message = await self.messaging.booking_confirmation(
            reservation.customer_name,
            reservation.date,
            reservation.time,
            reservation.party_size,
        )
        logger.info("Reservation %s created for %s", reservation.id, reservation.date)
        return ReservationConfirmation(**reservation.model_dump(), confirmation_message=message)

    async def update(self, reservation_id: int, payload: ReservationUpdate) -> Optional[ReservationRead]:
        """Apply ``payload``; returns ``None`` for an unknown id."""
        existing = await self.storage.reservations.get(reservation_id)
        if existing is None:
            return None

        changes: Dict[str, Any] = {
            k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None
        }
        changes.pop("no_show_count", None)
        if (
            changes.get("status") == ReservationStatus.NO_SHOW
            and existing.status != ReservationStatus.NO_SHOW
        ):
            changes["no_show_count"] = existing.no_show_count + 1
            logger.info("Reservation %s marked no-show (count=%d)", reservation_id, changes["no_show_count"])
        return await self.storage.reservations.update(reservation_id, changes)

    async def for_date(self, day: dt.date) -> List[ReservationRead]:
        """Reservations on ``day`` ordered by time of day."""
        return [r for r in await self.storage.reservations.list() if r.date == day]

    async def today(self, today: Optional[dt.date] = None) -> List[ReservationRead]:
        return await self.for_date(today or dt.date.today())

from __future__ import annotations

import datetime as dt

import pytest

from tablemate.models.enums import ReservationStatus
from tablemate.models.schemas import ReservationCreate, ReservationUpdate
from tablemate.services.messaging_service import MessagingService
from tablemate.services.repository import InMemoryStorage
from tablemate.services.reservation_service import ReservationService
from tests.stubs import StubAnalysisClient

DAY = dt.date(2024, 3, 1)


def _booking(**overrides):
    data = dict(customer_name="Davis Couple", party_size=2, date=DAY, time="7:00 PM")
    data.update(overrides)
    return ReservationCreate(**data)


@pytest.mark.asyncio
async def test_create_returns_fallback_confirmation():
    service = ReservationService(InMemoryStorage())
    confirmation = await service.create(_booking())
    assert confirmation.id == 1
    assert confirmation.no_show_count == 0
    assert confirmation.confirmation_message == (
        "Dear Davis Couple, your reservation for 2 people on 2024-03-01 at 7:00 PM has been "
        "confirmed. We look forward to welcoming you to our restaurant!"
    )


@pytest.mark.asyncio
async def test_create_uses_model_text_when_available():
    client = StubAnalysisClient({"text": "See you Friday!"})
    service = ReservationService(InMemoryStorage(), MessagingService(client=client))
    confirmation = await service.create(_booking())
    assert confirmation.confirmation_message == "See you Friday!"
    assert client.requests[0].expect_json is False


@pytest.mark.asyncio
async def test_no_show_transition_increments_once():
    service = ReservationService(InMemoryStorage())
    created = await service.create(_booking())

    marked = await service.update(created.id, ReservationUpdate(status=ReservationStatus.NO_SHOW))
    assert marked.status is ReservationStatus.NO_SHOW
    assert marked.no_show_count == 1

    # already a no-show: no further increment
    again = await service.update(created.id, ReservationUpdate(status=ReservationStatus.NO_SHOW))
    assert again.no_show_count == 1

    await service.update(created.id, ReservationUpdate(status=ReservationStatus.CONFIRMED))
    third = await service.update(created.id, ReservationUpdate(status=ReservationStatus.NO_SHOW))
    assert third.no_show_count == 2


@pytest.mark.asyncio
async def test_no_show_count_is_not_writable():
    service = ReservationService(InMemoryStorage())
    created = await service.create(_booking())
    payload = ReservationUpdate.model_validate({"party_size": 3, "no_show_count": 9})
    updated = await service.update(created.id, payload)
    assert updated.party_size == 3
    assert updated.no_show_count == 0


@pytest.mark.asyncio
async def test_update_unknown_reservation():
    service = ReservationService(InMemoryStorage())
    assert await service.update(42, ReservationUpdate(party_size=4)) is None


@pytest.mark.asyncio
async def test_today_sorted_by_time():
    service = ReservationService(InMemoryStorage())
    await service.create(_booking(time="8:00 PM", customer_name="Miller Group"))
    await service.create(_booking(time="6:30 PM", customer_name="Johnson Party"))
    await service.create(_booking(date=DAY + dt.timedelta(days=1), customer_name="Tomorrow"))
    today = await service.today(today=DAY)
    assert [r.customer_name for r in today] == ["Johnson Party", "Miller Group"]

from __future__ import annotations

import datetime as dt

import pytest

from tablemate.models.enums import ReservationStatus, TemplateCategory
from tablemate.models.schemas import ReservationRead, ResponseTemplateRead
from tablemate.services.messaging_service import MessagingService, render_template
from tests.stubs import FailingAnalysisClient, StubAnalysisClient

NOW = dt.datetime(2024, 3, 1, 12, 0)


def test_render_template_substitutes_known_tokens():
    text = "Table for {partySize} at {time}."
    assert render_template(text, {"partySize": 4, "time": "6:30 PM"}) == "Table for 4 at 6:30 PM."


def test_render_template_leaves_unknown_tokens():
    assert render_template("Hi {customerName}, {unknown} {not a token}", {"customerName": "Ana"}) == (
        "Hi Ana, {unknown} {not a token}"
    )


def test_render_merges_reservation_and_context():
    template = ResponseTemplateRead(
        id=1,
        name="No-Show Follow-up",
        category=TemplateCategory.NO_SHOW,
        template="{customerName} missed {date} at {time}. {note}",
        created_at=NOW,
    )
    reservation = ReservationRead(
        id=3,
        customer_name="Davis Couple",
        party_size=2,
        date=dt.date(2024, 3, 1),
        time="7:00 PM",
        status=ReservationStatus.NO_SHOW,
        created_at=NOW,
    )
    message = MessagingService().render(template, {"note": "Call ahead", "time": "19:00"}, reservation)
    assert message == "Davis Couple missed 2024-03-01 at 19:00. Call ahead"


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [None, FailingAnalysisClient(), StubAnalysisClient({"text": "   "})])
async def test_booking_confirmation_fallback(client):
    text = await MessagingService(client=client).booking_confirmation("Ana", dt.date(2024, 5, 2), "6:30 PM", 4)
    assert text == (
        "Dear Ana, your reservation for 4 people on 2024-05-02 at 6:30 PM has been confirmed. "
        "We look forward to welcoming you to our restaurant!"
    )

"""Guest facing messages: booking confirmations and response templates."""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any, Dict, Mapping, Optional

from tablemate.models.schemas import ReservationRead, ResponseTemplateRead
from tablemate.services.analysis_client import AnalysisClient, AnalysisRequest, run_analysis
from tablemate.utils.prompts import get_booking_confirmation_prompt

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def fallback_confirmation(customer_name: str, date: str, time: str, party_size: int) -> str:
    return (
        f"Dear {customer_name}, your reservation for {party_size} people on {date} at {time} "
        "has been confirmed. We look forward to welcoming you to our restaurant!"
    )


def reservation_context(reservation: ReservationRead) -> Dict[str, Any]:
    """Placeholder values a reservation contributes to a template."""
    return {
        "customerName": reservation.customer_name,
        "partySize": reservation.party_size,
        "date": reservation.date.isoformat(),
        "time": reservation.time,
    }


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` tokens from ``context``.

    Tokens with no value in ``context`` are left exactly as written, and
    text that is not a simple ``{identifier}`` is never touched.
    """

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        value = context.get(key)
        return match.group(0) if value is None else str(value)

    return PLACEHOLDER_RE.sub(_replace, template)


class MessagingService:
    def __init__(self, client: Optional[AnalysisClient] = None, timeout: Optional[float] = None) -> None:
        self.client = client
        self.timeout = timeout

    async def booking_confirmation(
        self,
        customer_name: str,
        date: dt.date | str,
        time: str,
        party_size: int,
    ) -> str:
        """Write a confirmation message, falling back to a fixed wording."""
        date_label = date.isoformat() if isinstance(date, dt.date) else str(date)
        request = AnalysisRequest(
            instructions=get_booking_confirmation_prompt(),
            text=(
                f"Generate a booking confirmation for {customer_name} on {date_label} "
                f"at {time} for {party_size} people."
            ),
            expect_json=False,
            max_tokens=200,
        )
        result = await run_analysis(self.client, request, "booking_confirmation", timeout=self.timeout)
        text = (result or {}).get("text")
        if isinstance(text, str) and text.strip():
            return text.strip()
        return fallback_confirmation(customer_name, date_label, time, party_size)

    def render(
        self,
        template: ResponseTemplateRead,
        context: Optional[Mapping[str, Any]] = None,
        reservation: Optional[ReservationRead] = None,
    ) -> str:
        # explicit context wins over reservation fields
        values: Dict[str, Any] = reservation_context(reservation) if reservation is not None else {}
        values.update(context or {})
        return render_template(template.template, values)

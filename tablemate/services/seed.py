"""Demo data for a fresh installation.

Seeding is an explicit step run at startup (``SEED_DEMO_DATA``) or from
``python -m tablemate.scripts.init_db --seed``; importing this module has
no side effects. Timestamps are relative to the moment of seeding so the
dashboard shows recent activity.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from tablemate.models.enums import FraudFlag, ReceiptStatus, ReservationStatus, Sentiment, TemplateCategory
from tablemate.services.repository import Storage
from tablemate.utils.helpers import utcnow

logger = logging.getLogger(__name__)


async def seed_demo_data(storage: Storage, now: Optional[dt.datetime] = None, today: Optional[dt.date] = None) -> None:
    now = now or utcnow()
    today = today or dt.date.today()

    def hours(n: int) -> dt.datetime:
        return now - dt.timedelta(hours=n)

    receipts = [
        dict(
            filename="starbucks_receipt.jpg",
            original_filename="starbucks_receipt.jpg",
            merchant_name="Starbucks - Downtown",
            amount=12.45,
            transaction_date=hours(2),
            items=["Grande Latte", "Blueberry Muffin"],
            trust_score=0.98,
            fraud_flags=[],
            confidence=0.98,
            status=ReceiptStatus.VERIFIED,
            created_at=hours(2),
        ),
        dict(
            filename="luigi_receipt.jpg",
            original_filename="luigi_receipt.jpg",
            merchant_name="Luigi's Italian Bistro",
            amount=87.23,
            transaction_date=hours(5),
            items=["Pasta Carbonara", "Caesar Salad", "Wine"],
            trust_score=0.72,
            fraud_flags=[FraudFlag.UNUSUAL_AMOUNT_PATTERN],
            confidence=0.72,
            status=ReceiptStatus.FLAGGED,
            created_at=hours(5),
        ),
        dict(
            filename="blue_bottle_receipt.jpg",
            original_filename="blue_bottle_receipt.jpg",
            merchant_name="Blue Bottle Coffee",
            amount=8.75,
            transaction_date=hours(24),
            items=["Cappuccino", "Croissant"],
            trust_score=0.95,
            fraud_flags=[],
            confidence=0.95,
            status=ReceiptStatus.VERIFIED,
            created_at=hours(24),
        ),
    ]
    # oldest first so ids follow creation time
    for data in reversed(receipts):
        await storage.receipts.create(data)

    reviews = [
        dict(
            customer_name="Jennifer L.",
            rating=5,
            content="Amazing cocktails and the staff was incredibly helpful! Will definitely be back.",
            sentiment=Sentiment.POSITIVE,
            ai_reply=(
                "Thank you so much, Jennifer! We're delighted you loved our cocktails and experienced "
                "our team's dedication. Can't wait to serve you again soon!"
            ),
            has_replied=True,
            created_at=hours(24),
        ),
        dict(
            customer_name="Mike R.",
            rating=4,
            content="The food was great, but we waited too long for service.",
            sentiment=Sentiment.MIXED,
            ai_reply=(
                "Thank you for the feedback, Mike! We're thrilled you enjoyed the food. We sincerely "
                "apologize for the wait time and are working to improve our service speed. We'd love "
                "to welcome you back for a better experience!"
            ),
            has_replied=False,
            created_at=hours(2),
        ),
    ]
    for data in reviews:
        await storage.reviews.create(data)

    reservations = [
        dict(customer_name="Johnson Party", email="johnson@email.com", phone="555-0123", party_size=4,
             time="6:30 PM", no_show_count=0, created_at=hours(3)),
        dict(customer_name="Davis Couple", email="davis@email.com", phone="555-0124", party_size=2,
             time="7:00 PM", no_show_count=1, created_at=hours(2)),
        dict(customer_name="Miller Group", email="miller@email.com", phone="555-0125", party_size=6,
             time="8:00 PM", special_requests="Birthday celebration", is_vip=True, no_show_count=0,
             created_at=hours(1)),
    ]
    for data in reservations:
        data.setdefault("is_vip", False)
        await storage.reservations.create({**data, "date": today, "status": ReservationStatus.CONFIRMED})

    templates = [
        dict(
            name="Booking Confirmation",
            category=TemplateCategory.BOOKING,
            template=(
                "Thanks so much for booking with us! We've reserved a table for {partySize} at {time}. "
                "We look forward to hosting you for a wonderful experience!"
            ),
        ),
        dict(
            name="No-Show Follow-up",
            category=TemplateCategory.NO_SHOW,
            template=(
                "Guest missed reservation on {date} without cancellation. Consider this when accepting "
                "future bookings. Maintain professional courtesy."
            ),
        ),
        dict(
            name="Positive Review Reply",
            category=TemplateCategory.REVIEW,
            template=(
                "Thank you so much for your wonderful review! We're thrilled you had a great experience "
                "with us. We can't wait to welcome you back soon!"
            ),
        ),
    ]
    for data in templates:
        await storage.response_templates.create({**data, "is_active": True})

    logger.info(
        "Seeded demo data: %d receipts, %d reviews, %d reservations, %d templates",
        len(receipts),
        len(reviews),
        len(reservations),
        len(templates),
    )

"""Aggregate figures for the owner dashboard and weekly review digest."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from tablemate.models.schemas import DashboardStats, ReviewRead
from tablemate.services.repository import Storage
from tablemate.utils.helpers import utcnow

RECENT_WINDOW = dt.timedelta(days=7)


def reviews_since(reviews: List[ReviewRead], cutoff: dt.datetime) -> List[ReviewRead]:
    return [r for r in reviews if r.created_at > cutoff]


async def recent_reviews(storage: Storage, now: Optional[dt.datetime] = None) -> List[ReviewRead]:
    """Reviews created within the last seven days."""
    now = now or utcnow()
    return reviews_since(await storage.reviews.list(), now - RECENT_WINDOW)


async def dashboard_stats(
    storage: Storage,
    now: Optional[dt.datetime] = None,
    today: Optional[dt.date] = None,
) -> DashboardStats:
    now = now or utcnow()
    today = today or dt.date.today()
    receipts = await storage.receipts.list()
    reviews = await storage.reviews.list()
    reservations = await storage.reservations.list()

    trust_score = sum(r.trust_score for r in receipts) / len(receipts) if receipts else 0.0
    average_rating = sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0
    return DashboardStats(
        receipts_processed=len(receipts),
        trust_score=trust_score,
        average_review_score=average_rating,
        total_reviews=len(reviews),
        today_reservations=sum(1 for r in reservations if r.date == today),
        reviews_last_week=len(reviews_since(reviews, now - RECENT_WINDOW)),
    )

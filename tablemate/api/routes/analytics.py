"""API routes for the weekly review digest and dashboard figures."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tablemate.api.dependencies import get_review_insight_service, get_storage
from tablemate.models.schemas import DashboardStats, WeeklySummary
from tablemate.services.dashboard_service import dashboard_stats, recent_reviews
from tablemate.services.repository import Storage
from tablemate.services.review_insight_service import ReviewInsightService

router = APIRouter(tags=["analytics"])


@router.get("/analytics/weekly-summary", response_model=WeeklySummary)
async def weekly_summary(
    storage: Storage = Depends(get_storage),
    insights: ReviewInsightService = Depends(get_review_insight_service),
) -> WeeklySummary:
    """Summarise reviews from the last seven days."""
    reviews = await recent_reviews(storage)
    return await insights.weekly_summary([{"rating": r.rating, "content": r.content} for r in reviews])


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(storage: Storage = Depends(get_storage)) -> DashboardStats:
    return await dashboard_stats(storage)

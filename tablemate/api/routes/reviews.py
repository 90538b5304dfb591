"""API routes for customer reviews and replies."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tablemate.api.dependencies import get_review_insight_service, get_storage
from tablemate.models.schemas import ReviewCreate, ReviewRead, ReviewReply
from tablemate.services.repository import Storage
from tablemate.services.review_insight_service import ReviewInsightService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewRead])
async def list_reviews(storage: Storage = Depends(get_storage)) -> List[ReviewRead]:
    return await storage.reviews.list()


@router.get("/needing-reply", response_model=List[ReviewRead])
async def reviews_needing_reply(storage: Storage = Depends(get_storage)) -> List[ReviewRead]:
    """Reviews that have not been answered yet, newest first."""
    return [r for r in await storage.reviews.list() if not r.has_replied]


@router.post("", response_model=ReviewRead)
async def create_review(
    payload: ReviewCreate,
    storage: Storage = Depends(get_storage),
    insights: ReviewInsightService = Depends(get_review_insight_service),
) -> ReviewRead:
    """Store a review with its sentiment and a suggested reply."""
    insight = await insights.analyze_review(payload.content)
    review = await storage.reviews.create(
        {
            **payload.model_dump(),
            "sentiment": insight.sentiment,
            "ai_reply": insight.suggested_reply,
            "has_replied": False,
        }
    )
    logger.info("Review %s stored sentiment=%s", review.id, insight.sentiment.value)
    return review


@router.patch("/{review_id}/reply", response_model=ReviewRead)
async def reply_to_review(
    review_id: int,
    payload: ReviewReply,
    storage: Storage = Depends(get_storage),
) -> ReviewRead:
    """Mark a review as replied, optionally replacing the suggested reply."""
    changes: dict = {"has_replied": True}
    if payload.custom_reply:
        changes["ai_reply"] = payload.custom_reply
    review = await storage.reviews.update(review_id, changes)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review

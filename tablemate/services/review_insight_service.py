"""Review insight service.

Classifies review sentiment, drafts a suggested reply and produces the
weekly review digest. Both operations ask the injected
``AnalysisClient`` first and repair its answer field by field; when the
client is missing or fails they fall back to local rules, so callers
always get a usable result.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from tablemate.models.enums import Sentiment
from tablemate.models.schemas import ReviewInsight, WeeklySummary
from tablemate.services.analysis_client import AnalysisClient, AnalysisRequest, run_analysis
from tablemate.services.sentiment import classify_sentiment
from tablemate.utils.helpers import clamp_unit
from tablemate.utils.prompts import (
    format_reviews_for_summary,
    get_review_reply_prompt,
    get_weekly_summary_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8
DEFAULT_REPLY = "Thank you for your feedback!"
DEFAULT_SUMMARY = "Great week overall!"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _string_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(entry).strip() for entry in raw if entry is not None and str(entry).strip()]


def _parse_sentiment(raw: Any) -> Sentiment:
    try:
        return Sentiment(str(raw).strip().lower())
    except ValueError:
        return Sentiment.NEUTRAL


class ReviewInsightService:
    """Sentiment, suggested replies and weekly summaries for reviews."""

    def __init__(self, client: Optional[AnalysisClient] = None, timeout: Optional[float] = None) -> None:
        self.client = client
        self.timeout = timeout

    async def analyze_review(self, content: str) -> ReviewInsight:
        """Return sentiment, a suggested reply and a confidence for ``content``."""
        request = AnalysisRequest(
            instructions=get_review_reply_prompt(),
            text=f'Please analyze this restaurant review and suggest a reply: "{content}"',
            max_tokens=500,
        )
        result = await run_analysis(self.client, request, "review_sentiment", timeout=self.timeout)
        if result is None:
            return classify_sentiment(content)

        reply = result.get("suggested_reply", result.get("suggestedReply"))
        reply = str(reply).strip() if reply else ""
        return ReviewInsight(
            sentiment=_parse_sentiment(result.get("sentiment")),
            suggested_reply=reply or DEFAULT_REPLY,
            confidence=clamp_unit(result.get("confidence"), DEFAULT_CONFIDENCE),
        )

    async def weekly_summary(self, reviews: Sequence[Dict[str, Any]]) -> WeeklySummary:
        """Summarise ``reviews`` (mappings with ``rating`` and ``content``)."""
        request = AnalysisRequest(
            instructions=get_weekly_summary_prompt(),
            text=(
                "Summarize this week's customer reviews for a restaurant:\n\n"
                + format_reviews_for_summary(reviews)
            ),
            max_tokens=800,
        )
        result = await run_analysis(self.client, request, "weekly_summary", timeout=self.timeout)
        if result is None:
            return self.fallback_summary(reviews)

        summary = result.get("summary")
        return WeeklySummary(
            summary=str(summary).strip() if summary else DEFAULT_SUMMARY,
            positive_highlights=_string_list(result.get("positive_highlights", result.get("positiveHighlights"))),
            areas_for_improvement=_string_list(
                result.get("areas_for_improvement", result.get("areasForImprovement"))
            ),
        )

    @staticmethod
    def fallback_summary(reviews: Sequence[Dict[str, Any]]) -> WeeklySummary:
        """Rating based digest used when the model is unavailable."""
        count = len(reviews)
        if count == 0:
            return WeeklySummary(
                summary="No reviews this week. Focus on encouraging satisfied customers to share their experiences!",
                positive_highlights=["Opportunity to focus on customer experience improvements"],
                areas_for_improvement=[
                    "Encourage more customers to leave reviews",
                    "Consider implementing a review collection strategy",
                ],
            )

        average = sum(int(r["rating"]) for r in reviews) / count
        positives = sum(1 for r in reviews if int(r["rating"]) >= 4)
        negatives = sum(1 for r in reviews if int(r["rating"]) <= 2)

        if average >= 4:
            tone = "Your customers are loving their experience!"
        elif average >= 3:
            tone = "Good feedback overall with room for improvement."
        else:
            tone = "Some challenges this week, but every review is a learning opportunity."

        if positives:
            highlights = [
                f"{positives} positive review{_plural(positives)} (4+ stars)",
                "Customers appreciated your service",
            ]
        else:
            highlights = ["Opportunity to focus on customer experience improvements"]

        if negatives:
            improvements = [
                f"{negatives} review{_plural(negatives)} below 3 stars - consider following up",
                "Monitor common themes in feedback",
            ]
        else:
            improvements = ["Keep up the excellent work!"]

        return WeeklySummary(
            summary=(
                f"This week you received {count} review{_plural(count)} with an average "
                f"rating of {average:.1f} stars. {tone}"
            ),
            positive_highlights=highlights,
            areas_for_improvement=improvements,
        )

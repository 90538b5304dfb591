from __future__ import annotations

import pytest

from tablemate.models.enums import Sentiment
from tablemate.services.review_insight_service import DEFAULT_REPLY, DEFAULT_SUMMARY, ReviewInsightService
from tests.stubs import FailingAnalysisClient, SlowAnalysisClient, StubAnalysisClient


@pytest.mark.asyncio
async def test_model_insight_is_used_and_confidence_clamped():
    client = StubAnalysisClient({"sentiment": "Negative", "suggested_reply": "So sorry!", "confidence": 1.7})
    insight = await ReviewInsightService(client=client).analyze_review("Cold soup")
    assert insight.sentiment is Sentiment.NEGATIVE
    assert insight.suggested_reply == "So sorry!"
    assert insight.confidence == 1.0
    assert "Cold soup" in client.requests[0].text


@pytest.mark.asyncio
async def test_missing_fields_get_defaults():
    insight = await ReviewInsightService(client=StubAnalysisClient({})).analyze_review("The food was great")
    assert insight.sentiment is Sentiment.NEUTRAL
    assert insight.suggested_reply == DEFAULT_REPLY
    assert insight.confidence == pytest.approx(0.8)


@pytest.mark.asyncio
async def test_camel_case_reply_and_unknown_sentiment():
    client = StubAnalysisClient({"sentiment": "ecstatic", "suggestedReply": "Thanks!", "confidence": "0.4"})
    insight = await ReviewInsightService(client=client).analyze_review("ok")
    assert insight.sentiment is Sentiment.NEUTRAL
    assert insight.suggested_reply == "Thanks!"
    assert insight.confidence == pytest.approx(0.4)


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [None, FailingAnalysisClient()])
async def test_failure_uses_keyword_fallback(client):
    insight = await ReviewInsightService(client=client).analyze_review("It was fine, nothing special")
    assert insight.sentiment is Sentiment.MIXED
    assert insight.confidence == pytest.approx(0.7)


@pytest.mark.asyncio
async def test_timeout_uses_keyword_fallback():
    service = ReviewInsightService(client=SlowAnalysisClient(delay=5), timeout=0.01)
    insight = await service.analyze_review("awful")
    assert insight.sentiment is Sentiment.NEGATIVE


@pytest.mark.asyncio
async def test_weekly_summary_from_model():
    client = StubAnalysisClient(
        {
            "summary": "Solid week.",
            "positive_highlights": ["Friendly staff", "", None],
            "areasForImprovement": ["Wait times"],
        }
    )
    summary = await ReviewInsightService(client=client).weekly_summary([{"rating": 5, "content": "Lovely"}])
    assert summary.summary == "Solid week."
    assert summary.positive_highlights == ["Friendly staff"]
    assert summary.areas_for_improvement == ["Wait times"]
    assert '5 stars: "Lovely"' in client.requests[0].text


@pytest.mark.asyncio
async def test_weekly_summary_model_defaults():
    summary = await ReviewInsightService(client=StubAnalysisClient({})).weekly_summary([])
    assert summary.summary == DEFAULT_SUMMARY
    assert summary.positive_highlights == []
    assert summary.areas_for_improvement == []


@pytest.mark.asyncio
async def test_weekly_summary_fallback_counts():
    reviews = [
        {"rating": 5, "content": "great"},
        {"rating": 4, "content": "good"},
        {"rating": 1, "content": "bad"},
    ]
    summary = await ReviewInsightService().weekly_summary(reviews)
    assert summary.summary.startswith("This week you received 3 reviews with an average rating of 3.3 stars.")
    assert "Good feedback overall" in summary.summary
    assert summary.positive_highlights[0] == "2 positive reviews (4+ stars)"
    assert summary.areas_for_improvement[0] == "1 review below 3 stars - consider following up"


def test_weekly_summary_fallback_empty_week():
    summary = ReviewInsightService.fallback_summary([])
    assert summary.summary.startswith("No reviews this week.")
    assert len(summary.areas_for_improvement) == 2


def test_weekly_summary_fallback_all_positive():
    summary = ReviewInsightService.fallback_summary([{"rating": 5, "content": "x"}])
    assert "1 review with an average rating of 5.0 stars" in summary.summary
    assert "loving their experience" in summary.summary
    assert summary.areas_for_improvement == ["Keep up the excellent work!"]

"""Keyword based review sentiment classifier.

Used whenever the language model is unavailable. Categories are checked
in a fixed order and the first one with a keyword present in the
lower-cased review text wins, so a review mentioning both "great" and
"terrible" is classified as positive.
"""

from __future__ import annotations

from typing import List, Tuple

from tablemate.models.enums import Sentiment
from tablemate.models.schemas import ReviewInsight

FALLBACK_CONFIDENCE = 0.7

DEFAULT_REPLY = (
    "Thank you for your feedback! We appreciate you taking the time to share "
    "your experience with us."
)

# (sentiment, keywords, reply) evaluated top to bottom
SENTIMENT_RULES: List[Tuple[Sentiment, Tuple[str, ...], str]] = [
    (
        Sentiment.POSITIVE,
        ("great", "excellent", "amazing", "love"),
        "Thank you so much for your wonderful feedback! We're thrilled that you had "
        "such a great experience. We look forward to serving you again soon!",
    ),
    (
        Sentiment.NEGATIVE,
        ("bad", "terrible", "awful", "hate"),
        "We sincerely apologize for your disappointing experience. Your feedback is "
        "important to us, and we'd like to make this right. Please contact us directly "
        "so we can address your concerns.",
    ),
    (
        Sentiment.MIXED,
        ("okay", "fine", "average"),
        "Thank you for your honest feedback. We're always working to improve, and your "
        "input helps us do better. We hope to exceed your expectations on your next visit.",
    ),
]


def classify_sentiment(text: str) -> ReviewInsight:
    """Classify ``text`` with the keyword rules and pick the canned reply."""
    lowered = (text or "").lower()
    for sentiment, keywords, reply in SENTIMENT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return ReviewInsight(sentiment=sentiment, suggested_reply=reply, confidence=FALLBACK_CONFIDENCE)
    return ReviewInsight(sentiment=Sentiment.NEUTRAL, suggested_reply=DEFAULT_REPLY, confidence=FALLBACK_CONFIDENCE)

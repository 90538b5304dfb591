"""Prompt templates for the language model calls.

Keeping prompts in a central location makes it easier to iterate on
their content and ensure consistency across the services. The receipt
prompt asks for raw trust factors only; the aggregate score and the
fraud flags are always computed locally from them.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Iterable, Mapping


def get_receipt_analysis_prompt() -> str:
    """Return the system prompt for receipt image analysis."""
    return dedent(
        """
        You are an expert receipt analysis system. Analyze the receipt
        image and extract key information while assessing how
        trustworthy the document looks.

        Respond with JSON in this exact format:
        {
          "merchant_name": string | null,
          "amount": number | null,
          "date": ISO8601 date string | null,
          "items": [string],
          "trust_factors": {
            "image_quality": number between 0 and 1 (clarity, resolution, lighting),
            "data_completeness": number between 0 and 1 (merchant, amount, date, items present),
            "format_consistency": number between 0 and 1 (standard receipt layout),
            "amount_reasonableness": number between 0 and 1 (plausible for the merchant type),
            "timestamp_validity": number between 0 and 1 (date/time makes sense)
          },
          "confidence": number between 0 and 1
        }

        Trust factor guidelines:
        - image_quality: 0.9+ for clear, well-lit images; 0.6-0.8 for acceptable; <0.6 for poor
        - data_completeness: 0.9+ for all fields present; 0.7-0.8 for most fields; <0.7 for missing critical info
        - format_consistency: 0.9+ for standard format; 0.8-0.9 for minor variations; <0.8 for unusual format
        - amount_reasonableness: 0.9+ for typical amounts; 0.7-0.8 for unusual but possible; <0.7 for suspicious
        - timestamp_validity: 0.9+ for recent, logical dates; 0.8-0.9 for acceptable; <0.8 for suspicious dates
        """
    ).strip()


def get_review_reply_prompt() -> str:
    """Return the system prompt for review sentiment and reply drafting."""
    return dedent(
        """
        You are a friendly, emotionally intelligent assistant helping a
        restaurant respond to reviews.

        Analyze the review sentiment and generate an empathetic,
        professional reply that:
        - Acknowledges specific points mentioned
        - Thanks the customer genuinely
        - Addresses any concerns with understanding
        - Invites them back when appropriate
        - Maintains a warm, human tone

        Respond with JSON in this format:
        {
          "sentiment": "positive" | "negative" | "mixed" | "neutral",
          "suggested_reply": string,
          "confidence": number between 0 and 1
        }
        """
    ).strip()


def get_weekly_summary_prompt() -> str:
    """Return the system prompt for the weekly review digest."""
    return dedent(
        """
        You are a friendly business analyst creating weekly review
        summaries for restaurant owners.

        Create a warm, encouraging summary that highlights positive
        trends and gently notes areas for improvement. Keep the tone
        upbeat and supportive.

        Respond with JSON in this format:
        {
          "summary": string,
          "positive_highlights": [string],
          "areas_for_improvement": [string]
        }
        """
    ).strip()


def get_booking_confirmation_prompt() -> str:
    return "Generate a warm, professional booking confirmation message for a restaurant reservation."


def format_reviews_for_summary(reviews: Iterable[Mapping[str, object]]) -> str:
    """Render reviews as ``N stars: "content"`` lines."""
    return "\n".join(f'{r["rating"]} stars: "{r["content"]}"' for r in reviews)

"""Enumeration types used throughout the back-office API.

Enumerations make it easier to constrain the values that can be
stored in the database or passed through the API. When modifying these
enums update any corresponding database columns or Pydantic validators
so that new values are accepted where appropriate.
"""

from enum import Enum


class ReceiptStatus(str, Enum):
    """Verification state of an uploaded receipt."""

    PENDING = "pending"
    VERIFIED = "verified"
    FLAGGED = "flagged"


class FraudFlag(str, Enum):
    """Named indicators of suspicious receipt patterns."""

    POOR_IMAGE_QUALITY = "poor_image_quality"
    MISSING_CRITICAL_INFO = "missing_critical_info"
    INCONSISTENT_FORMATTING = "inconsistent_formatting"
    UNUSUAL_AMOUNT_PATTERN = "unusual_amount_pattern"
    SUSPICIOUS_TIMESTAMP = "suspicious_timestamp"
    ROUND_AMOUNT_SUSPICIOUS = "round_amount_suspicious"
    # Marks a simulated result produced while AI analysis was unavailable
    AI_ANALYSIS_UNAVAILABLE = "ai_analysis_unavailable"


class Sentiment(str, Enum):
    """Coarse tone of a customer review."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIXED = "mixed"
    NEUTRAL = "neutral"


class ReservationStatus(str, Enum):
    """Lifecycle states of a table reservation."""

    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class TemplateCategory(str, Enum):
    """Where a response template is used."""

    BOOKING = "booking"
    REVIEW = "review"
    NO_SHOW = "no-show"

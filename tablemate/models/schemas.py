"""Pydantic schemas for request and response models.

Pydantic models are used for validating and serialising data that
crosses the boundary of the API. This module defines both the domain
schemas produced by the analysis services (``TrustFactors``,
``ReceiptAnalysis``, ``ReviewInsight``, ``WeeklySummary``) and the API
facing schemas for creating, updating and returning receipts, reviews,
reservations and response templates.

Read schemas are shared by both storage backends: the in-memory store
keeps instances of them directly and the SQL store validates ORM rows
into them with ``from_attributes``.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tablemate.utils.helpers import clamp_unit
from tablemate.utils.sanitization import sanitize_optional, sanitize_string
from .enums import FraudFlag, ReceiptStatus, ReservationStatus, Sentiment, TemplateCategory


# ---------------------------------------------------------------------------
# Domain schemas produced by the analysis services

DEFAULT_FACTOR_VALUE = 0.7


class TrustFactors(BaseModel):
    """Five normalised sub-scores feeding the receipt trust score.

    Values are expected in [0, 1]; the scoring functions clamp rather
    than reject, so out-of-range values are accepted here.
    """

    image_quality: float = DEFAULT_FACTOR_VALUE
    data_completeness: float = DEFAULT_FACTOR_VALUE
    format_consistency: float = DEFAULT_FACTOR_VALUE
    amount_reasonableness: float = DEFAULT_FACTOR_VALUE
    timestamp_validity: float = DEFAULT_FACTOR_VALUE

    @classmethod
    def from_raw(cls, raw: Any) -> "TrustFactors":
        """Build clamped factors from an untrusted mapping.

        Both snake_case and camelCase keys are accepted since model output
        follows whichever convention the prompt showed it. Missing or
        malformed values default to 0.7.
        """
        raw = raw if isinstance(raw, dict) else {}
        values: Dict[str, float] = {}
        for name in cls.model_fields:
            head, *rest = name.split("_")
            camel = head + "".join(part.title() for part in rest)
            value = raw.get(name, raw.get(camel))
            values[name] = clamp_unit(value, DEFAULT_FACTOR_VALUE)
        return cls(**values)


class ReceiptAnalysis(BaseModel):
    """Result of analysing a receipt image."""

    merchant_name: Optional[str] = None
    amount: Optional[float] = None
    transaction_date: Optional[dt.datetime] = None
    items: List[str] = Field(default_factory=list)
    trust_factors: TrustFactors = Field(default_factory=TrustFactors)
    trust_score: float
    fraud_flags: List[FraudFlag] = Field(default_factory=list)
    confidence: float
    simulated: bool = Field(default=False, description="True when produced by the local fallback")


class ReviewInsight(BaseModel):
    """Sentiment label and suggested reply for a review."""

    sentiment: Sentiment
    suggested_reply: str
    confidence: float


class WeeklySummary(BaseModel):
    """Friendly digest of the last week's reviews."""

    summary: str
    positive_highlights: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# API request/response schemas


class ReceiptRead(BaseModel):
    id: int
    filename: str
    original_filename: str
    merchant_name: Optional[str] = None
    amount: Optional[float] = None
    transaction_date: Optional[dt.datetime] = None
    items: List[str] = Field(default_factory=list)
    trust_score: float
    fraud_flags: List[FraudFlag] = Field(default_factory=list)
    confidence: float
    trust_factors: Optional[TrustFactors] = None
    status: ReceiptStatus
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ReceiptUpdate(BaseModel):
    """Staff correction of a stored receipt."""

    merchant_name: Optional[str] = None
    status: Optional[ReceiptStatus] = None

    @field_validator("merchant_name", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_optional(v)


class ReviewCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    content: str = Field(min_length=1)

    @field_validator("customer_name", "content", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v


class ReviewRead(BaseModel):
    id: int
    customer_name: str
    rating: int
    content: str
    sentiment: Optional[Sentiment] = None
    ai_reply: Optional[str] = None
    has_replied: bool = False
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewReply(BaseModel):
    """Mark a review as answered, optionally with a hand-written reply."""

    custom_reply: Optional[str] = None

    @field_validator("custom_reply", mode="before")
    def sanitize_reply(cls, v):
        return sanitize_optional(v)


class ReservationCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    party_size: int = Field(gt=0)
    date: dt.date
    time: str = Field(min_length=1)
    status: ReservationStatus = ReservationStatus.CONFIRMED
    special_requests: Optional[str] = None
    is_vip: bool = False

    @field_validator("customer_name", "time", mode="before")
    def sanitize_required(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("email", "phone", "special_requests", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_optional(v)


class ReservationUpdate(BaseModel):
    """Partial reservation update. ``no_show_count`` is derived, never written."""

    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    party_size: Optional[int] = Field(default=None, gt=0)
    date: Optional[dt.date] = None
    time: Optional[str] = None
    status: Optional[ReservationStatus] = None
    special_requests: Optional[str] = None
    is_vip: Optional[bool] = None

    @field_validator("customer_name", "email", "phone", "time", "special_requests", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_optional(v)


class ReservationRead(BaseModel):
    id: int
    customer_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    party_size: int
    date: dt.date
    time: str
    status: ReservationStatus
    special_requests: Optional[str] = None
    is_vip: bool = False
    no_show_count: int = 0
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationConfirmation(ReservationRead):
    confirmation_message: str


class ResponseTemplateCreate(BaseModel):
    name: str = Field(min_length=1)
    category: TemplateCategory
    template: str = Field(min_length=1)
    is_active: bool = True

    @field_validator("name", "template", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v


class ResponseTemplateUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[TemplateCategory] = None
    template: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "template", mode="before")
    def sanitize_fields(cls, v):
        return sanitize_optional(v)


class ResponseTemplateRead(BaseModel):
    id: int
    name: str
    category: TemplateCategory
    template: str
    is_active: bool = True
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class TemplateRenderRequest(BaseModel):
    """Values substituted into a template's ``{placeholder}`` tokens."""

    context: Dict[str, Any] = Field(default_factory=dict)
    reservation_id: Optional[int] = None


class TemplateRenderResponse(BaseModel):
    template_id: int
    message: str


class DashboardStats(BaseModel):
    receipts_processed: int
    trust_score: float
    average_review_score: float
    total_reviews: int
    today_reservations: int
    reviews_last_week: int

"""SQLAlchemy ORM models for the back-office API.

These models define the relational database schema used when the
``database`` storage backend is active. Enumerated fields are stored as
strings using their enum values. List and mapping attributes (receipt
items, fraud flags and trust factors) are kept in JSON columns so that
list order survives a round trip.

The entities are independent streams; no table references another by
foreign key. Call the ``init_db`` helper during development to create
the tables.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    Integer,
    String,
    Text,
)

from tablemate.core.database import Base
from tablemate.utils.helpers import utcnow
from .enums import ReceiptStatus, ReservationStatus, Sentiment, TemplateCategory


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Receipt(Base):
    """Uploaded receipt and its trust analysis."""

    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)
    merchant_name = Column(String, nullable=True)
    amount = Column(Float, nullable=True)
    transaction_date = Column(DateTime, nullable=True)
    items = Column(JSON, nullable=False, default=list)
    trust_score = Column(Float, nullable=False, default=0.0)
    fraud_flags = Column(JSON, nullable=False, default=list)
    confidence = Column(Float, nullable=False, default=0.0)
    trust_factors = Column(JSON, nullable=True)
    status = Column(
        Enum(ReceiptStatus, values_callable=_enum_values, native_enum=False),
        nullable=False,
        default=ReceiptStatus.PENDING,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Review(Base):
    """Customer review with its suggested reply."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    sentiment = Column(Enum(Sentiment, values_callable=_enum_values, native_enum=False), nullable=True)
    ai_reply = Column(Text, nullable=True)
    has_replied = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Reservation(Base):
    """Table reservation."""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    party_size = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String, nullable=False)
    status = Column(
        Enum(ReservationStatus, values_callable=_enum_values, native_enum=False),
        nullable=False,
        default=ReservationStatus.CONFIRMED,
    )
    special_requests = Column(Text, nullable=True)
    is_vip = Column(Boolean, default=False, nullable=False)
    no_show_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class ResponseTemplate(Base):
    """Reusable message with ``{placeholder}`` tokens."""

    __tablename__ = "response_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(
        Enum(TemplateCategory, values_callable=_enum_values, native_enum=False),
        nullable=False,
    )
    template = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

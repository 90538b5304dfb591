from __future__ import annotations

import datetime as dt

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tablemate.models.enums import FraudFlag, ReceiptStatus, ReservationStatus, TemplateCategory
from tablemate.models.schemas import TrustFactors
from tablemate.models.tables import Base
from tablemate.services.repository import InMemoryStorage, SqlStorage

NOW = dt.datetime(2024, 3, 1, 12, 0)


def _receipt(**overrides):
    data = dict(
        filename="receipt_1.jpg",
        original_filename="lunch.jpg",
        merchant_name="Cafe",
        amount=12.5,
        items=["Soup", "Bread", "Tea"],
        trust_score=0.9,
        fraud_flags=[FraudFlag.SUSPICIOUS_TIMESTAMP, FraudFlag.POOR_IMAGE_QUALITY],
        confidence=0.8,
        trust_factors={"image_quality": 0.5, "data_completeness": 0.9},
        status=ReceiptStatus.VERIFIED,
    )
    data.update(overrides)
    return data


def _reservation(time, day=dt.date(2024, 3, 1), **overrides):
    data = dict(customer_name="Guest", party_size=2, date=day, time=time, status=ReservationStatus.CONFIRMED)
    data.update(overrides)
    return data


@pytest_asyncio.fixture(params=["memory", "sql"])
async def storage(request):
    if request.param == "memory":
        yield InMemoryStorage()
        return
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    async with Session() as session:
        yield SqlStorage(session)
    await engine.dispose()


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamp(storage):
    first = await storage.receipts.create(_receipt())
    second = await storage.receipts.create(_receipt())
    assert first.id != second.id
    assert isinstance(first.created_at, dt.datetime)
    assert await storage.receipts.count() == 2


@pytest.mark.asyncio
async def test_receipt_lists_round_trip_in_order(storage):
    created = await storage.receipts.create(_receipt())
    fetched = await storage.receipts.get(created.id)
    assert fetched.items == ["Soup", "Bread", "Tea"]
    assert fetched.fraud_flags == [FraudFlag.SUSPICIOUS_TIMESTAMP, FraudFlag.POOR_IMAGE_QUALITY]
    assert fetched.trust_factors.image_quality == 0.5
    assert fetched.status is ReceiptStatus.VERIFIED


@pytest.mark.asyncio
async def test_unknown_ids_return_none(storage):
    assert await storage.receipts.get(999) is None
    assert await storage.reviews.update(999, {"has_replied": True}) is None


@pytest.mark.asyncio
async def test_update_is_partial_and_protects_identity(storage):
    created = await storage.receipts.create(_receipt(created_at=NOW))
    updated = await storage.receipts.update(
        created.id,
        {"status": ReceiptStatus.FLAGGED, "id": 77, "created_at": NOW + dt.timedelta(days=1)},
    )
    assert updated.id == created.id
    assert updated.created_at == NOW
    assert updated.status is ReceiptStatus.FLAGGED
    assert updated.merchant_name == "Cafe"


@pytest.mark.asyncio
async def test_receipts_and_reviews_newest_first(storage):
    for hours in (5, 1, 3):
        await storage.reviews.create(
            dict(customer_name=f"h{hours}", rating=4, content="ok", created_at=NOW - dt.timedelta(hours=hours))
        )
    names = [r.customer_name for r in await storage.reviews.list()]
    assert names == ["h1", "h3", "h5"]


@pytest.mark.asyncio
async def test_reservations_ordered_by_date_then_time(storage):
    await storage.reservations.create(_reservation("8:00 PM"))
    await storage.reservations.create(_reservation("6:30 PM"))
    await storage.reservations.create(_reservation("11:00 AM", day=dt.date(2024, 3, 2)))
    await storage.reservations.create(_reservation("10:15 AM"))
    times = [r.time for r in await storage.reservations.list()]
    assert times == ["10:15 AM", "6:30 PM", "8:00 PM", "11:00 AM"]


@pytest.mark.asyncio
async def test_templates_by_id_and_defaults(storage):
    created = await storage.response_templates.create(
        dict(name="Thanks", category=TemplateCategory.REVIEW, template="Thanks {customerName}", is_active=True)
    )
    assert created.is_active is True
    assert [t.id for t in await storage.response_templates.list()] == [created.id]


@pytest.mark.asyncio
async def test_is_empty(storage):
    assert await storage.is_empty() is True
    await storage.reviews.create(dict(customer_name="A", rating=5, content="great", has_replied=False))
    assert await storage.is_empty() is False


@pytest.mark.asyncio
async def test_memory_store_returns_copies():
    storage = InMemoryStorage()
    created = await storage.receipts.create(_receipt())
    created.items.append("Injected")
    fetched = await storage.receipts.get(created.id)
    assert fetched.items == ["Soup", "Bread", "Tea"]


@pytest.mark.asyncio
async def test_memory_store_copies_nested_models_on_write():
    storage = InMemoryStorage()
    factors = TrustFactors(image_quality=0.5)
    created = await storage.receipts.create(_receipt(trust_factors=factors))
    factors.image_quality = 0.1

    updated_factors = TrustFactors(image_quality=0.7)
    await storage.receipts.update(created.id, {"trust_factors": updated_factors})
    updated_factors.image_quality = 0.2

    fetched = await storage.receipts.get(created.id)
    assert fetched.trust_factors.image_quality == 0.7

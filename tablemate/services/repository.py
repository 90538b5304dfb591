"""Record storage for receipts, reviews, reservations and templates.

A ``Storage`` bundles four ``RecordStore`` collections. Every store
offers the same small contract:

* ``create(data)`` assigns the next integer id and the creation
  timestamp and returns the stored record.
* ``get(id)`` / ``update(id, changes)`` return ``None`` for unknown ids.
  Updates are partial; ``id`` and ``created_at`` are never overwritten.
* ``list()`` returns every record in the collection's display order.

Two backends implement it. ``InMemoryStorage`` keeps Pydantic copies in
dictionaries and is used for demos and tests. ``SqlStorage`` wraps an
``AsyncSession`` and persists through the ORM models in
:mod:`tablemate.models.tables`; list and mapping attributes live in JSON
columns so element order survives the round trip. Both backends return
the read schemas from :mod:`tablemate.models.schemas` and sort in
Python with the same keys, so callers see identical ordering.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from sqlalchemy import JSON, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tablemate.models import tables
from tablemate.models.enums import ReceiptStatus, ReservationStatus
from tablemate.models.schemas import ReceiptRead, ReservationRead, ResponseTemplateRead, ReviewRead
from tablemate.utils.helpers import parse_time_of_day, utcnow

RecordT = TypeVar("RecordT", bound=BaseModel)
SortKey = Callable[[Any], Any]

PROTECTED_FIELDS = frozenset({"id", "created_at"})


def _newest_first(record: Any) -> Any:
    return (record.created_at, record.id)


def _reservation_order(record: ReservationRead) -> Any:
    parsed = parse_time_of_day(record.time)
    time_key = (0, parsed.isoformat()) if parsed else (1, record.time)
    return (record.date, time_key, record.id)


def _by_id(record: Any) -> Any:
    return record.id


class RecordStore(ABC, Generic[RecordT]):
    """One collection of records keyed by auto-incrementing id."""

    def __init__(self, schema: Type[RecordT], sort_key: SortKey, reverse: bool = False) -> None:
        self.schema = schema
        self.sort_key = sort_key
        self.reverse = reverse

    def _sorted(self, records: List[RecordT]) -> List[RecordT]:
        return sorted(records, key=self.sort_key, reverse=self.reverse)

    @abstractmethod
    async def create(self, data: Mapping[str, Any]) -> RecordT:
        ...

    @abstractmethod
    async def get(self, record_id: int) -> Optional[RecordT]:
        ...

    @abstractmethod
    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        ...

    @abstractmethod
    async def list(self) -> List[RecordT]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...


class InMemoryRecordStore(RecordStore[RecordT]):
    """Dictionary backed store. Records are copied in and out."""

    def __init__(
        self,
        schema: Type[RecordT],
        sort_key: SortKey,
        reverse: bool = False,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(schema, sort_key, reverse)
        self.defaults = defaults or {}
        self._records: Dict[int, RecordT] = {}
        self._next_id = 1

    async def create(self, data: Mapping[str, Any]) -> RecordT:
        values = {**self.defaults, **{k: v for k, v in data.items() if k != "id"}}
        if values.get("created_at") is None:
            values["created_at"] = utcnow()
        # no await between id assignment and insert, so ids stay unique
        record_id = self._next_id
        record = self.schema.model_validate({**values, "id": record_id}).model_copy(deep=True)
        self._next_id += 1
        self._records[record_id] = record
        return record.model_copy(deep=True)

    async def get(self, record_id: int) -> Optional[RecordT]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        existing = self._records.get(record_id)
        if existing is None:
            return None
        merged = existing.model_dump()
        merged.update({k: v for k, v in changes.items() if k not in PROTECTED_FIELDS})
        record = self.schema.model_validate(merged).model_copy(deep=True)
        self._records[record_id] = record
        return record.model_copy(deep=True)

    async def list(self) -> List[RecordT]:
        return self._sorted([r.model_copy(deep=True) for r in self._records.values()])

    async def count(self) -> int:
        return len(self._records)


class SqlRecordStore(RecordStore[RecordT]):
    """Store persisting through an SQLAlchemy ORM model."""

    def __init__(
        self,
        session: AsyncSession,
        model: Type[Any],
        schema: Type[RecordT],
        sort_key: SortKey,
        reverse: bool = False,
    ) -> None:
        super().__init__(schema, sort_key, reverse)
        self.session = session
        self.model = model
        columns = model.__table__.columns
        self._columns = {c.name for c in columns}
        self._json_columns = {c.name for c in columns if isinstance(c.type, JSON)}

    def _column_values(self, data: Mapping[str, Any], allow_created_at: bool) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in self._columns or key == "id":
                continue
            if key == "created_at" and (not allow_created_at or value is None):
                continue
            if key in self._json_columns and value is not None:
                value = to_jsonable_python(value)
            values[key] = value
        return values

    async def create(self, data: Mapping[str, Any]) -> RecordT:
        row = self.model(**self._column_values(data, allow_created_at=True))
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self.schema.model_validate(row)

    async def get(self, record_id: int) -> Optional[RecordT]:
        row = await self.session.get(self.model, record_id)
        return self.schema.model_validate(row) if row is not None else None

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        row = await self.session.get(self.model, record_id)
        if row is None:
            return None
        for key, value in self._column_values(changes, allow_created_at=False).items():
            setattr(row, key, value)
        await self.session.commit()
        await self.session.refresh(row)
        return self.schema.model_validate(row)

    async def list(self) -> List[RecordT]:
        result = await self.session.execute(select(self.model))
        return self._sorted([self.schema.model_validate(row) for row in result.scalars().all()])

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(self.model.id)))
        return int(result.scalar() or 0)


class Storage:
    """The four record collections used by the application."""

    receipts: RecordStore[ReceiptRead]
    reviews: RecordStore[ReviewRead]
    reservations: RecordStore[ReservationRead]
    response_templates: RecordStore[ResponseTemplateRead]

    async def is_empty(self) -> bool:
        for store in (self.receipts, self.reviews, self.reservations, self.response_templates):
            if await store.count():
                return False
        return True


class InMemoryStorage(Storage):
    def __init__(self) -> None:
        self.receipts = InMemoryRecordStore(
            ReceiptRead,
            _newest_first,
            reverse=True,
            defaults={
                "items": [],
                "fraud_flags": [],
                "trust_score": 0.0,
                "confidence": 0.0,
                "status": ReceiptStatus.PENDING,
            },
        )
        self.reviews = InMemoryRecordStore(ReviewRead, _newest_first, reverse=True, defaults={"has_replied": False})
        self.reservations = InMemoryRecordStore(
            ReservationRead,
            _reservation_order,
            defaults={"status": ReservationStatus.CONFIRMED, "is_vip": False, "no_show_count": 0},
        )
        self.response_templates = InMemoryRecordStore(ResponseTemplateRead, _by_id, defaults={"is_active": True})


class SqlStorage(Storage):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.receipts = SqlRecordStore(session, tables.Receipt, ReceiptRead, _newest_first, reverse=True)
        self.reviews = SqlRecordStore(session, tables.Review, ReviewRead, _newest_first, reverse=True)
        self.reservations = SqlRecordStore(session, tables.Reservation, ReservationRead, _reservation_order)
        self.response_templates = SqlRecordStore(session, tables.ResponseTemplate, ResponseTemplateRead, _by_id)

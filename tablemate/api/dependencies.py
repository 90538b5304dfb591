"""Common dependencies for FastAPI routes.

Routes never build storage or services themselves. They depend on the
functions below so tests can swap in an in-memory storage and stub
analysis clients through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request

from tablemate.core.config import settings
from tablemate.core.database import get_db
from tablemate.services.analysis_client import AnalysisClient, build_default_client
from tablemate.services.messaging_service import MessagingService
from tablemate.services.receipt_analysis_service import ReceiptAnalysisService
from tablemate.services.repository import InMemoryStorage, SqlStorage, Storage
from tablemate.services.reservation_service import ReservationService
from tablemate.services.review_insight_service import ReviewInsightService


# -----------------------------------------------------------------------------
# Shared resources

_analysis_client: Optional[AnalysisClient] = None
_analysis_client_built = False


async def get_storage(request: Request) -> AsyncGenerator[Storage, None]:
    """Yield the configured storage backend for one request."""
    if settings.uses_memory_storage:
        storage = getattr(request.app.state, "storage", None)
        if storage is None:
            storage = request.app.state.storage = InMemoryStorage()
        yield storage
        return
    async for session in get_db():
        yield SqlStorage(session)


def get_analysis_client() -> Optional[AnalysisClient]:
    """Return the process wide analysis client, or ``None`` without an API key."""
    global _analysis_client, _analysis_client_built
    if not _analysis_client_built:
        _analysis_client = build_default_client()
        _analysis_client_built = True
    return _analysis_client


# -----------------------------------------------------------------------------
# Services


def get_receipt_analysis_service(
    client: Optional[AnalysisClient] = Depends(get_analysis_client),
) -> ReceiptAnalysisService:
    return ReceiptAnalysisService(client=client)


def get_review_insight_service(
    client: Optional[AnalysisClient] = Depends(get_analysis_client),
) -> ReviewInsightService:
    return ReviewInsightService(client=client)


def get_messaging_service(
    client: Optional[AnalysisClient] = Depends(get_analysis_client),
) -> MessagingService:
    return MessagingService(client=client)


def get_reservation_service(
    storage: Storage = Depends(get_storage),
    messaging: MessagingService = Depends(get_messaging_service),
) -> ReservationService:
    return ReservationService(storage, messaging)

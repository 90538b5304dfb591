"""Entry point for the FastAPI application.

This module constructs the FastAPI app, includes all routers and
sets up startup and shutdown events. When run with uvicorn it
prepares the configured storage backend, optionally seeds demo data
and loads configuration from ``tablemate.core.config``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from tablemate.api.error_handlers import generic_exception_handler, validation_exception_handler
from tablemate.api.routes.analytics import router as analytics_router
from tablemate.api.routes.receipts import router as receipts_router
from tablemate.api.routes.reservations import router as reservations_router
from tablemate.api.routes.response_templates import router as response_templates_router
from tablemate.api.routes.reviews import router as reviews_router
from tablemate.core.config import settings
from tablemate.core.database import AsyncSessionLocal, get_db_debug_info, init_db
from tablemate.core.observability import init_sentry
from tablemate.services.repository import InMemoryStorage, SqlStorage, Storage
from tablemate.services.seed import seed_demo_data

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


async def _seed_if_empty(storage: Storage) -> None:
    if await storage.is_empty():
        await seed_demo_data(storage)
    else:
        logger.info("Storage already has data; skipping demo seed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    logger.info("Starting up (storage=%s)...", settings.STORAGE_BACKEND)
    if init_sentry("api"):
        logger.info("Sentry SDK initialized (api)")

    if settings.uses_memory_storage:
        app.state.storage = InMemoryStorage()
        if settings.SEED_DEMO_DATA:
            await _seed_if_empty(app.state.storage)
    else:
        await init_db()
        if settings.SEED_DEMO_DATA:
            async with AsyncSessionLocal() as session:
                await _seed_if_empty(SqlStorage(session))
    yield
    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    version="0.1.0",
    lifespan=lifespan,
)

# Development accepts any origin; otherwise only the configured ones
allow_origins = ["*"] if settings.is_development else list(settings.BACKEND_CORS_ORIGINS or [])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(receipts_router, prefix=settings.API_PREFIX)
app.include_router(reviews_router, prefix=settings.API_PREFIX)
app.include_router(reservations_router, prefix=settings.API_PREFIX)
app.include_router(response_templates_router, prefix=settings.API_PREFIX)
app.include_router(analytics_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}


@app.api_route("/health", methods=["GET", "HEAD"])
async def health_check():
    """Health check endpoint (supports GET & HEAD)."""
    return {"status": "healthy"}


@app.get("/debug/db")
async def db_debug():
    """Return non-sensitive storage diagnostics (for development)."""
    return get_db_debug_info()

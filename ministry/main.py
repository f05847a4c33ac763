"""Ministry Scheduler API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MinistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and schema created on startup; engine disposed on shutdown

Design Decisions:
    - Lifespan context manager over @app.on_event
    - Access logging as HTTP middleware (one line per request with status and latency)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ministry.api.error_handlers import register_error_handlers
from ministry.api.routes import health, users
from ministry.config import get_settings
from ministry.infrastructure.database import close_db, init_db
from ministry.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)

API_TITLE = "Ministry Scheduler API"
API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await manager.create_schema()
    logger.info(f"{API_TITLE} started")
    yield
    logger.info(f"{API_TITLE} shutting down")
    await close_db()


app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)


@app.get("/")
async def root():
    return {"message": API_TITLE, "version": API_VERSION}

"""Logbook API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LogbookError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - One SessionRegistry per process, attached to app.state at import

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SessionRegistry created outside the lifespan so ASGI test transports
      (which skip lifespan) still get one
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.core.session_context import SessionRegistry
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging
from app.config import get_settings
from app.api.routes import health, logbook

logger = logging.getLogger(__name__)


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
    if settings.database_create_all:
        await manager.create_all()
    logger.info("Logbook API started")
    yield
    await manager.close()
    logger.info("Logbook API shutting down")


app = FastAPI(
    title="Logbook API", version="1.0.0", lifespan=lifespan,
)
app.state.sessions = SessionRegistry()

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(logbook.router)

register_error_handlers(app)

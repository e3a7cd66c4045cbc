"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint, and constructs the ``Database`` that
routes receive through dependencies. The module-level ``app`` instance
allows ``uvicorn speakika.api.app:app --reload``; ``main()`` (the
``speakika-api`` script) serves it on the configured host and port.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import speakika.services.storage  # noqa: F401  (registers ORM tables on Base)
from speakika.api.middleware.error_handler import register_error_handlers
from speakika.api.routes import speech, system
from speakika.core.config import Settings, get_settings
from speakika.core.models import HealthResponse
from speakika.services.storage.database import Database
from speakika.services.transcription import BaseTranscriber

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: create tables if configured to.
    Shutdown: dispose the DB engine.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database
    if settings.create_tables_on_startup:
        await database.create_all()
    logger.info("Speak Ika API started (transcriber=%s)", settings.speech_transcriber)
    yield
    await database.dispose()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    speech_transcriber: BaseTranscriber | None = None,
) -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Args:
        settings: Configuration (defaults to ``get_settings()``).
        database: Pre-built database (tests pass an in-memory one).
        speech_transcriber: Transcriber behind ``POST /api/transcribe``;
            built from settings on first request when omitted.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """
    settings = settings or get_settings()
    logging.getLogger("speakika").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="Speak Ika",
        description="Ika speech workbench API: database liveness and speech recognition.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.speech_transcriber = speech_transcriber

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(system.router, prefix="/api")
    app.include_router(speech.router, prefix="/api")

    return app


app = create_app()


def main() -> None:
    """Serve ``app`` with uvicorn on ``APP_HOST``:``APP_PORT``."""
    settings = get_settings()
    logger.info("Starting Speak Ika API on %s:%d", settings.app_host, settings.app_port)
    uvicorn.run(
        "speakika.api.app:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )

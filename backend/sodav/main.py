"""SODAV Monitor API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SodavError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database manager and identity client built in the lifespan, held on app.state

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Collaborators on app.state rather than module singletons: one composition
      root, and tests swap them per client
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sodav.api.error_handlers import register_error_handlers
from sodav.api.routes import (
    api_keys, auth, channels, detections, health, recognitions, songs,
)
from sodav.config import get_settings
from sodav.infrastructure.database import DatabaseSessionManager
from sodav.infrastructure.identity_provider import SupabaseIdentityClient
from sodav.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.identity_verifier = SupabaseIdentityClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout_seconds=settings.identity_timeout_seconds,
    )
    logger.info("SODAV Monitor API started")
    yield
    await app.state.identity_verifier.aclose()
    await app.state.db_manager.dispose()
    logger.info("SODAV Monitor API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="SODAV Monitor API", version="1.0.0", lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(api_keys.router)
    app.include_router(songs.router)
    app.include_router(channels.router)
    app.include_router(detections.router)
    app.include_router(recognitions.router)

    register_error_handlers(app, debug=settings.debug)
    return app


app = create_app()

"""FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from psalter import __version__
from psalter.api.routes import router
from psalter.config import Settings
from psalter.ingest.loader import DataLoader

logger = logging.getLogger(__name__)


def create_app(
    loader: DataLoader | None = None, settings: Settings | None = None
) -> FastAPI:
    """Create the dashboard API.

    Args:
        loader: Session data loader (default: built from settings)
        settings: Application settings (default: Settings())

    Returns:
        Configured FastAPI application
    """
    settings = settings or (loader.settings if loader else Settings())
    loader = loader or DataLoader.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load session data once at startup."""
        state = await loader.load()
        if state.error:
            logger.error(f"Serving in error state: {state.error}")
        else:
            logger.info("Psalter data ready")
        yield

    app = FastAPI(
        title="Czech Psalter",
        description="Comparison data for medieval Czech psalter manuscripts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.loader = loader
    app.state.settings = settings

    # CORS for the dashboard dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Czech Psalter",
            "version": __version__,
            "docs": "/docs",
            "api": "/api/v1",
        }

    return app

# ============================================================================
# GIS ASSET REGISTRY - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application hosting the GIS page session
# CREATED: 19 OCT 2026
# ============================================================================
"""
GIS Asset Registry Main Application

FastAPI application that:
1. Serves the GIS page (map panel plus asset form)
2. Owns one GisPageSession for the app lifetime (mount on startup,
   unmount on shutdown)
3. Exposes the session over /api/v1/gis for the browser view

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE
from api.gis_routes import router as gis_router, set_gis_session
from api.ui_routes import router as ui_router
from core.config import get_defaults
from infrastructure import AssetBackendClient, MapLibreProvider
from services import GisPageSession

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)

# Global instances
_session: GisPageSession = None


def build_session() -> GisPageSession:
    """Wire the page session from environment defaults."""
    defaults = get_defaults()
    backend = AssetBackendClient(
        base_url=defaults.backend.base_url,
        timeout=defaults.backend.timeout_seconds,
    )
    return GisPageSession(MapLibreProvider(), backend=backend, defaults=defaults)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Mounts the page session on startup, unmounts it on shutdown.
    """
    global _session

    logger.info(f"Starting GIS Asset Registry v{__version__} (Build {BUILD_DATE})")

    _session = build_session()
    await _session.mount()
    set_gis_session(_session)
    logger.info(
        f"GIS session {_session.session_id} mounted "
        f"({len(_session.store)} assets, map {_session.adapter.state.value})"
    )

    yield

    # Shutdown
    logger.info("Shutting down GIS Asset Registry...")

    set_gis_session(None)
    _session.unmount()

    logger.info("GIS Asset Registry stopped")


# Create FastAPI app
app = FastAPI(
    title="GIS Asset Registry",
    description="Geospatial asset registry with map marker synchronization",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(gis_router, prefix="/api/v1")

# Include UI routes
app.include_router(ui_router)


@app.get("/livez")
async def livez():
    """Liveness check: the process is up."""
    return {"status": "alive"}


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "GIS Asset Registry",
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
        "ui": "/ui/gis",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )

# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for the GIS page session
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the GIS asset registry.
"""

from .gis_routes import router, set_gis_session
from .schemas import (
    CommitResponse,
    FieldEditRequest,
    HealthResponse,
)

__all__ = [
    "router",
    "set_gis_session",
    "CommitResponse",
    "FieldEditRequest",
    "HealthResponse",
]

# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - External boundaries
# PURPOSE: Backend REST client and concrete map provider
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the GIS asset service.

Provides:
- AssetBackendClient: async httpx client for the asset/consumables backend
- MapLibreProvider: MapProvider backing the MapLibre GL JS page

Usage:
    from infrastructure import AssetBackendClient, MapLibreProvider

    backend = AssetBackendClient("http://localhost:5000/api")
    assets = await backend.list_assets()
"""

from infrastructure.backend_client import AssetBackendClient
from infrastructure.maplibre_provider import MapLibreProvider

__all__ = [
    "AssetBackendClient",
    "MapLibreProvider",
]

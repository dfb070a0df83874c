# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Asset registry, map synchronization and form binding services
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

The GIS core: store, surface adapter, selection, editor, reconciler, and
the page session that composes them.

Usage:
    from services import GisPageSession
    from infrastructure import MapLibreProvider

    session = GisPageSession(MapLibreProvider())
    await session.mount()
"""

from .asset_store import AssetStore
from .map_surface import MapContainer, MapProvider, MapSurfaceAdapter, format_popup_label
from .asset_editor import AssetEditor
from .selection import SelectionController
from .reconciler import SyncReconciler
from .gis_session import GisPageSession

__all__ = [
    "AssetStore",
    "MapContainer",
    "MapProvider",
    "MapSurfaceAdapter",
    "format_popup_label",
    "AssetEditor",
    "SelectionController",
    "SyncReconciler",
    "GisPageSession",
]

# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All value objects for the GIS asset registry:
    - Asset / Draft / CommitResult  (store and form)
    - StoreChange                   (store -> reconciler notification)
    - SurfaceOptions / MarkerHandle / RenderSnapshot (map surface)
    - Consumable / Panchayat        (REST boundary records)
"""

from core.models.asset import ASSET_FIELDS, Asset, Draft, CommitResult
from core.models.store_change import StoreChange
from core.models.surface import SurfaceOptions, MarkerHandle, RenderSnapshot
from core.models.consumable import Consumable, Panchayat

__all__ = [
    # Asset
    "ASSET_FIELDS",
    "Asset",
    "Draft",
    "CommitResult",
    # Store
    "StoreChange",
    # Surface
    "SurfaceOptions",
    "MarkerHandle",
    "RenderSnapshot",
    # REST boundary
    "Consumable",
    "Panchayat",
]

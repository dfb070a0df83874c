# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    AssetType,
    AssetCondition,
    SelectionState,
    CommitOperation,
    StoreChangeKind,
    SurfaceState,
)
from core.errors import (
    GisError,
    ValidationError,
    StaleSelectionError,
    SurfaceInitError,
    SurfaceNotReadyError,
    MarkerRenderError,
    NetworkError,
)
from core.models import Asset, Draft, CommitResult, StoreChange, MarkerHandle

__all__ = [
    # Enums
    "AssetType",
    "AssetCondition",
    "SelectionState",
    "CommitOperation",
    "StoreChangeKind",
    "SurfaceState",
    # Errors
    "GisError",
    "ValidationError",
    "StaleSelectionError",
    "SurfaceInitError",
    "SurfaceNotReadyError",
    "MarkerRenderError",
    "NetworkError",
    # Models
    "Asset",
    "Draft",
    "CommitResult",
    "StoreChange",
    "MarkerHandle",
]

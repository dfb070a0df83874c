# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared by store, map and form layers
# PURPOSE: Define asset enums and state enums for the GIS page session
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AssetType, AssetCondition, SelectionState, CommitOperation,
#          StoreChangeKind, SurfaceState
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the GIS asset registry.

These enums cross every boundary:
- REST (backend asset records)
- Python (store, reconciler, selection)
- Browser (form select options, map state JSON)
"""

from enum import Enum
from typing import List, Optional


# ============================================================================
# ASSET ENUMS
# ============================================================================

class AssetType(str, Enum):
    """Kinds of physical infrastructure that can be registered."""
    PUMP = "Pump"
    PIPELINE = "Pipeline"
    VALVE = "Valve"
    TREATMENT_PLANT = "TreatmentPlant"

    @property
    def display_name(self) -> str:
        """Label shown in the form select and popups."""
        if self is AssetType.TREATMENT_PLANT:
            return "Treatment Plant"
        return self.value

    @classmethod
    def parse(cls, raw: object) -> Optional["AssetType"]:
        """
        Parse a form or wire value.

        Accepts the enum value, the display name ("Treatment Plant") and
        is case-insensitive. Returns None if nothing matches.
        """
        if isinstance(raw, AssetType):
            return raw
        text = str(raw).strip().replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class AssetCondition(str, Enum):
    """Field-assessed condition of an asset."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"

    @classmethod
    def parse(cls, raw: object) -> Optional["AssetCondition"]:
        """Case-insensitive parse; None if nothing matches."""
        if isinstance(raw, AssetCondition):
            return raw
        text = str(raw).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


# ============================================================================
# SESSION STATE ENUMS
# ============================================================================

class SelectionState(str, Enum):
    """
    Selection controller states.

    State transitions:
        IDLE    -> EDITING  (select_from_map, edit_field, new_asset)
        EDITING -> EDITING  (select_from_map, edit_field, failed commit)
        EDITING -> IDLE     (commit, cancel, stale selection)
    """
    IDLE = "idle"            # No draft, form shows the blank template
    EDITING = "editing"      # Draft holds a working copy


class CommitOperation(str, Enum):
    """What a successful commit did to the store."""
    CREATE = "create"
    UPDATE = "update"


class StoreChangeKind(str, Enum):
    """Kinds of asset store mutations carried by change notifications."""
    UPSERTED = "upserted"
    REMOVED = "removed"
    LOADED = "loaded"
    CLEARED = "cleared"


class SurfaceState(str, Enum):
    """
    Map surface lifecycle.

    State transitions:
        UNINITIALIZED -> DEFERRED -> READY -> RELEASED
                      -> READY
                      -> FAILED
    """
    UNINITIALIZED = "uninitialized"
    DEFERRED = "deferred"    # Waiting for the container to mount
    READY = "ready"
    FAILED = "failed"        # Provider unreachable or key missing/invalid
    RELEASED = "released"    # Torn down on unmount

    def accepts_markers(self) -> bool:
        return self is SurfaceState.READY


__all__ = [
    "AssetType",
    "AssetCondition",
    "SelectionState",
    "CommitOperation",
    "StoreChangeKind",
    "SurfaceState",
]

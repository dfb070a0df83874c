# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for the map surface, backend and reconciler
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the GIS page session.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


DEFAULT_STYLE_URL = (
    "https://api.olamaps.io/tiles/vector/v1/styles/default-light-standard/style.json"
)


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class MapDefaults:
    """
    Defaults for the map rendering surface.

    The API key has no default: a missing key puts the map panel into
    its error state instead of failing startup.
    """
    api_key: str = ""
    style_url: str = DEFAULT_STYLE_URL

    # Initial view (longitude, latitude) - Delhi NCR
    center_lng: float = 77.2881183
    center_lat: float = 28.690229
    zoom: float = 16

    # DOM element hosting the map
    container_id: str = "map"

    # Marker and popup presentation
    marker_color: str = "red"
    marker_anchor: str = "bottom"
    marker_offset: Tuple[int, int] = (0, 6)
    popup_anchor: str = "bottom"
    popup_offset: Tuple[int, int] = (0, -30)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.center_lng, self.center_lat)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    @classmethod
    def from_env(cls) -> "MapDefaults":
        """Create from environment variables."""
        return cls(
            api_key=os.getenv("GIS_MAP_API_KEY", os.getenv("NEXT_PUBLIC_OLA_API_KEY", "")),
            style_url=os.getenv("GIS_MAP_STYLE_URL", DEFAULT_STYLE_URL),
            center_lng=float(os.getenv("GIS_MAP_CENTER_LNG", 77.2881183)),
            center_lat=float(os.getenv("GIS_MAP_CENTER_LAT", 28.690229)),
            zoom=float(os.getenv("GIS_MAP_ZOOM", 16)),
            container_id=os.getenv("GIS_MAP_CONTAINER_ID", "map"),
        )


@dataclass(frozen=True)
class BackendDefaults:
    """
    Defaults for the backend REST boundary.

    Persistence is the backend's job; the page only loads on mount and
    forwards commits/deletes when enabled.
    """
    base_url: str = "http://localhost:5000/api"
    timeout_seconds: float = 10.0
    load_on_mount: bool = True
    persist_commits: bool = True

    @classmethod
    def from_env(cls) -> "BackendDefaults":
        """Create from environment variables."""
        return cls(
            base_url=os.getenv("GIS_BACKEND_URL", "http://localhost:5000/api"),
            timeout_seconds=float(os.getenv("GIS_BACKEND_TIMEOUT", 10.0)),
            load_on_mount=_env_bool("GIS_LOAD_ON_MOUNT", True),
            persist_commits=_env_bool("GIS_PERSIST_COMMITS", True),
        )


@dataclass(frozen=True)
class ReconcileDefaults:
    """
    Defaults for marker reconciliation.
    """
    # Immediate retries per adapter call before the marker is degraded
    retry_attempts: int = 1

    # Passes per notification before giving up on a store that keeps changing
    max_passes: int = 100

    @classmethod
    def from_env(cls) -> "ReconcileDefaults":
        """Create from environment variables."""
        return cls(
            retry_attempts=int(os.getenv("GIS_RECONCILE_RETRIES", 1)),
            max_passes=int(os.getenv("GIS_RECONCILE_MAX_PASSES", 100)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    map: MapDefaults = field(default_factory=MapDefaults)
    backend: BackendDefaults = field(default_factory=BackendDefaults)
    reconcile: ReconcileDefaults = field(default_factory=ReconcileDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            map=MapDefaults.from_env(),
            backend=BackendDefaults.from_env(),
            reconcile=ReconcileDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_STYLE_URL",
    "MapDefaults",
    "BackendDefaults",
    "ReconcileDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]

# ============================================================================
# MAP SURFACE MODELS
# ============================================================================
# STATUS: Domain model - Values exchanged with the map rendering surface
# PURPOSE: Init options, marker handles and render snapshots
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SurfaceOptions, MarkerHandle, RenderSnapshot
# DEPENDENCIES: pydantic, dataclasses
# ============================================================================
"""
Map Surface Models

SurfaceOptions mirrors the init contract of the map library boundary:
    { apiKey, style, container, center, zoom }

MarkerHandle is opaque to everything except MapSurfaceAdapter. The
reconciler stores one per rendered asset and hands it back for
update/remove.

RenderSnapshot is what the reconciler compares to decide whether a
tracked marker needs re-rendering.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from pydantic import BaseModel, Field


class SurfaceOptions(BaseModel):
    """Options passed to MapProvider.initialize()."""

    api_key: str = Field(..., min_length=1)
    style: str
    container: str = Field(..., description="DOM element id hosting the map")
    center: Tuple[float, float] = Field(..., description="(longitude, latitude)")
    zoom: float = Field(default=16, ge=0, le=24)


@dataclass(frozen=True)
class MarkerHandle:
    """One rendered marker+popup pair."""

    asset_id: str
    marker: Any
    popup: Any


@dataclass(frozen=True)
class RenderSnapshot:
    """Rendered fields of one marker: coordinates and popup label."""

    latitude: float
    longitude: float
    label: str

    @classmethod
    def of(cls, asset: Any, label: str) -> "RenderSnapshot":
        return cls(latitude=asset.latitude, longitude=asset.longitude, label=label)


__all__ = ["SurfaceOptions", "MarkerHandle", "RenderSnapshot"]

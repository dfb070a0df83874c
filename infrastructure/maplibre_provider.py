# ============================================================================
# MAPLIBRE MAP PROVIDER
# ============================================================================
# STATUS: Infrastructure - Server-side model of a MapLibre/Ola Maps surface
# PURPOSE: Concrete MapProvider whose state the browser view draws
# CREATED: 19 OCT 2026
# ============================================================================
"""
MapLibre Provider

The browser page draws the map with MapLibre GL JS against the Ola Maps
vector style. This provider is the server-side half: it owns the surface
and marker registry and exposes render_state() for the view to poll.
Marker clicks come back through the API and are routed via
dispatch_click() to the callback registered at add_marker() time.

Surface ids and marker ids are opaque strings (uuid4 hex).
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.logging import ComponentType, get_logger
from core.models.surface import SurfaceOptions
from services.map_surface import MapProvider

logger = get_logger(__name__, ComponentType.MAP_SURFACE)


@dataclass
class MapLibrePopup:
    popup_id: str
    text: str
    anchor: str = "bottom"
    offset: List[int] = field(default_factory=lambda: [0, -30])


@dataclass
class MapLibreMarker:
    marker_id: str
    lng_lat: Tuple[float, float]
    popup: MapLibrePopup
    on_click: Callable[[], None]
    color: str = "red"
    anchor: str = "bottom"
    offset: List[int] = field(default_factory=lambda: [0, 6])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marker_id": self.marker_id,
            "lng_lat": list(self.lng_lat),
            "color": self.color,
            "anchor": self.anchor,
            "offset": self.offset,
            "popup": {
                "text": self.popup.text,
                "anchor": self.popup.anchor,
                "offset": self.popup.offset,
            },
        }


@dataclass
class MapLibreSurface:
    surface_id: str
    options: SurfaceOptions
    markers: Dict[str, MapLibreMarker] = field(default_factory=dict)

    def style_url_with_key(self) -> str:
        separator = "&" if "?" in self.options.style else "?"
        return f"{self.options.style}{separator}api_key={self.options.api_key}"


class MapLibreProvider(MapProvider):
    """In-process registry backing the MapLibre GL JS view."""

    def __init__(self):
        self._surfaces: Dict[str, MapLibreSurface] = {}

    def initialize(self, options: SurfaceOptions) -> MapLibreSurface:
        surface = MapLibreSurface(surface_id=uuid.uuid4().hex, options=options)
        self._surfaces[surface.surface_id] = surface
        logger.info(f"MapLibre surface {surface.surface_id} created on #{options.container}")
        return surface

    def add_popup(self, text: str, options: Dict[str, Any]) -> MapLibrePopup:
        if not isinstance(text, str):
            raise TypeError("Popup text must be a string")
        return MapLibrePopup(
            popup_id=uuid.uuid4().hex,
            text=text,
            anchor=options.get("anchor", "bottom"),
            offset=list(options.get("offset", [0, -30])),
        )

    def add_marker(
        self,
        surface: MapLibreSurface,
        lng_lat: Tuple[float, float],
        popup: MapLibrePopup,
        on_click: Callable[[], None],
        options: Dict[str, Any],
    ) -> MapLibreMarker:
        self._require_surface(surface)
        marker = MapLibreMarker(
            marker_id=uuid.uuid4().hex,
            lng_lat=(float(lng_lat[0]), float(lng_lat[1])),
            popup=popup,
            on_click=on_click,
            color=options.get("color", "red"),
            anchor=options.get("anchor", "bottom"),
            offset=list(options.get("offset", [0, 6])),
        )
        surface.markers[marker.marker_id] = marker
        return marker

    def remove_marker(self, surface: MapLibreSurface, marker: MapLibreMarker) -> None:
        self._require_surface(surface)
        # Removing an already removed marker is a no-op, as in MapLibre
        surface.markers.pop(marker.marker_id, None)

    def release(self, surface: MapLibreSurface) -> None:
        released = self._surfaces.pop(surface.surface_id, None)
        if released is not None:
            released.markers.clear()

    # ------------------------------------------------------------------
    # View support
    # ------------------------------------------------------------------

    def render_state(self, surface: Optional[MapLibreSurface]) -> Dict[str, Any]:
        """JSON-ready snapshot of the surface for the browser view."""
        if surface is None or surface.surface_id not in self._surfaces:
            return {"ready": False, "markers": []}
        return {
            "ready": True,
            "surface_id": surface.surface_id,
            "style": surface.style_url_with_key(),
            "container": surface.options.container,
            "center": list(surface.options.center),
            "zoom": surface.options.zoom,
            "markers": [marker.to_dict() for marker in surface.markers.values()],
        }

    def dispatch_click(self, surface: Optional[MapLibreSurface], marker_id: str) -> bool:
        """
        Deliver a browser click to the marker's callback.

        Returns False if the marker no longer exists (view was stale).
        """
        if surface is None or surface.surface_id not in self._surfaces:
            return False
        marker = surface.markers.get(marker_id)
        if marker is None:
            return False
        marker.on_click()
        return True

    def _require_surface(self, surface: MapLibreSurface) -> None:
        if surface is None or surface.surface_id not in self._surfaces:
            raise RuntimeError("MapLibre surface is not initialized or was released")


__all__ = ["MapLibreProvider", "MapLibreSurface", "MapLibreMarker", "MapLibrePopup"]

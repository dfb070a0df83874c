# ============================================================================
# MAP SURFACE ADAPTER
# ============================================================================
# STATUS: Domain service - Owner of the externally provided map surface
# PURPOSE: One-time surface init and marker+popup lifecycle behind a
#          stable contract
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
MapSurfaceAdapter

Wraps a third-party map library behind the capability set
{initialize, add_marker, add_popup, remove_marker}. Nothing else in the
service talks to the provider: the adapter exclusively owns the surface.

Initialization:
    - Called while already initialized -> no-op (libraries do not
      support re-init on the same container).
    - Called before the container is mounted -> deferred. The adapter
      registers a one-shot readiness callback on the MapContainer and
      initializes when it fires. Container availability is a timing
      race with rendering, not a programming error, so this never raises.
    - Missing API key or provider failure -> SurfaceInitError, state
      FAILED. The rest of the page keeps working.

Markers:
    - Popup text comes from format_popup_label(), never from the raw
      asset object.
    - update_marker() removes and recreates; most map libraries cannot
      move/relabel a marker atomically.
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.config import MapDefaults
from core.contracts import SurfaceState
from core.errors import SurfaceInitError, SurfaceNotReadyError
from core.logging import ComponentType, get_logger, log_checkpoint
from core.models.asset import Asset
from core.models.surface import MarkerHandle, SurfaceOptions

logger = get_logger(__name__, ComponentType.MAP_SURFACE)

ClickHandler = Callable[[str], None]
LabelFormatter = Callable[[Asset], str]


def format_popup_label(asset: Asset) -> str:
    """
    Human-readable popup text for an asset.

    Raises:
        TypeError: anything other than an Asset. Structured values must
            never be stringified into a popup.
    """
    if not isinstance(asset, Asset):
        raise TypeError(f"Popup label needs an Asset, got {type(asset).__name__}")
    return asset.display_label()


# ============================================================================
# CAPABILITY INTERFACES
# ============================================================================

class MapProvider(ABC):
    """
    Capability set of the external map rendering library.

    Implementations: infrastructure.maplibre_provider.MapLibreProvider,
    and test doubles.
    """

    @abstractmethod
    def initialize(self, options: SurfaceOptions) -> Any:
        """Create the surface. Returns an opaque surface reference."""

    @abstractmethod
    def add_popup(self, text: str, options: Dict[str, Any]) -> Any:
        """Create a popup carrying plain text."""

    @abstractmethod
    def add_marker(
        self,
        surface: Any,
        lng_lat: Tuple[float, float],
        popup: Any,
        on_click: Callable[[], None],
        options: Dict[str, Any],
    ) -> Any:
        """Place a marker at (longitude, latitude) with the popup attached."""

    @abstractmethod
    def remove_marker(self, surface: Any, marker: Any) -> None:
        """Remove a marker (and its popup) from the surface."""

    def release_popup(self, popup: Any) -> None:
        """Discard a popup that never got attached to a marker. Optional capability."""

    def release(self, surface: Any) -> None:
        """Destroy the surface. Optional capability."""

    def render_state(self, surface: Any) -> Dict[str, Any]:
        """JSON-ready view of the surface. Providers without a view model report no markers."""
        return {"ready": surface is not None, "markers": []}

    def dispatch_click(self, surface: Any, marker_id: str) -> bool:
        """
        Deliver a view click to the marker registered under marker_id.

        Returns False when the provider has no such marker. Providers
        whose library calls on_click directly never receive view clicks.
        """
        return False


class MapContainer:
    """
    The element that hosts the map.

    Mounting is signalled once by the view; callbacks registered with
    on_mounted() fire exactly once, on the first mark_mounted().
    """

    def __init__(self, element_id: str, mounted: bool = False):
        self.element_id = element_id
        self._mounted = mounted
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def on_mounted(self, callback: Callable[[], None]) -> None:
        """Register a one-shot readiness callback."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def mark_mounted(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def mark_unmounted(self) -> None:
        self._mounted = False
        self._callbacks = []


# ============================================================================
# ADAPTER
# ============================================================================

class MapSurfaceAdapter:
    """Owns one map surface for one page session."""

    def __init__(
        self,
        provider: MapProvider,
        map_defaults: Optional[MapDefaults] = None,
        label_formatter: LabelFormatter = format_popup_label,
    ):
        self._provider = provider
        self._defaults = map_defaults or MapDefaults()
        self._format_label = label_formatter

        self._state = SurfaceState.UNINITIALIZED
        self._surface: Any = None
        self._last_error: Optional[str] = None
        self._pending: Optional[Tuple[MapContainer, Tuple[float, float], float]] = None

        self._click_handler: Optional[ClickHandler] = None
        self._ready_listeners: List[Callable[[], None]] = []
        self._failure_listeners: List[Callable[[SurfaceInitError], None]] = []

    # ----------------------------------------------------------------
    # State
    # ----------------------------------------------------------------

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state.accepts_markers()

    @property
    def surface(self) -> Any:
        return self._surface

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def add_ready_listener(self, listener: Callable[[], None]) -> None:
        """Called once when the surface becomes ready (immediately if it is)."""
        if self.is_ready:
            listener()
            return
        self._ready_listeners.append(listener)

    def add_failure_listener(self, listener: Callable[[SurfaceInitError], None]) -> None:
        """Called when a deferred initialization fails."""
        self._failure_listeners.append(listener)

    def set_click_handler(self, handler: Optional[ClickHandler]) -> None:
        self._click_handler = handler

    # ----------------------------------------------------------------
    # Initialization
    # ----------------------------------------------------------------

    def initialize(
        self,
        container: MapContainer,
        center: Optional[Tuple[float, float]] = None,
        zoom: Optional[float] = None,
    ) -> Any:
        """
        Create the surface, or defer until the container is mounted.

        Returns:
            The surface when ready, None while deferred.

        Raises:
            SurfaceInitError: API key missing, adapter released, or the
                provider failed.
        """
        if self._state is SurfaceState.READY:
            logger.debug("Map surface already initialized, ignoring initialize()")
            return self._surface
        if self._state is SurfaceState.RELEASED:
            raise SurfaceInitError("Map surface was released; create a new session")

        center = center or self._defaults.center
        zoom = self._defaults.zoom if zoom is None else zoom

        if not self._defaults.has_api_key:
            self._fail("Map API key is not configured")

        if not container.is_mounted:
            self._pending = (container, center, zoom)
            container.on_mounted(self._on_container_mounted)
            if self._state is not SurfaceState.DEFERRED:
                self._state = SurfaceState.DEFERRED
                logger.info(f"Map container '{container.element_id}' not mounted, deferring init")
            return None

        return self._create_surface(container, center, zoom)

    def _on_container_mounted(self) -> None:
        if self._state is not SurfaceState.DEFERRED or self._pending is None:
            return
        container, center, zoom = self._pending
        try:
            self._create_surface(container, center, zoom)
        except SurfaceInitError as e:
            # Readiness arrives from the view; report through listeners
            for listener in list(self._failure_listeners):
                listener(e)

    def _create_surface(
        self,
        container: MapContainer,
        center: Tuple[float, float],
        zoom: float,
    ) -> Any:
        options = SurfaceOptions(
            api_key=self._defaults.api_key,
            style=self._defaults.style_url,
            container=container.element_id,
            center=center,
            zoom=zoom,
        )
        try:
            surface = self._provider.initialize(options)
        except Exception as e:
            self._fail(f"Map provider failed to initialize: {e}", cause=e)

        self._surface = surface
        self._pending = None
        self._state = SurfaceState.READY
        self._last_error = None
        log_checkpoint("surface_ready", {"container": container.element_id, "zoom": zoom})

        listeners, self._ready_listeners = self._ready_listeners, []
        for listener in listeners:
            listener()
        return surface

    def _fail(self, message: str, cause: Optional[Exception] = None) -> None:
        self._state = SurfaceState.FAILED
        self._last_error = message
        self._pending = None
        logger.error(message)
        raise SurfaceInitError(message) from cause

    # ----------------------------------------------------------------
    # Markers
    # ----------------------------------------------------------------

    def add_marker(self, asset: Asset) -> MarkerHandle:
        """Render a marker+popup pair for one asset."""
        self._require_ready()
        label = self._format_label(asset)
        popup = self._provider.add_popup(
            label,
            {
                "anchor": self._defaults.popup_anchor,
                "offset": list(self._defaults.popup_offset),
            },
        )
        try:
            marker = self._provider.add_marker(
                self._surface,
                asset.lng_lat,
                popup,
                partial(self.handle_marker_click, asset.id),
                {
                    "color": self._defaults.marker_color,
                    "anchor": self._defaults.marker_anchor,
                    "offset": list(self._defaults.marker_offset),
                },
            )
        except Exception:
            self._discard_popup(popup)
            raise
        return MarkerHandle(asset_id=asset.id, marker=marker, popup=popup)

    def update_marker(self, handle: MarkerHandle, asset: Asset) -> MarkerHandle:
        """Remove and recreate the marker+popup for an asset."""
        self.remove_marker(handle)
        return self.add_marker(asset)

    def remove_marker(self, handle: MarkerHandle) -> None:
        self._require_ready()
        self._provider.remove_marker(self._surface, handle.marker)

    def _discard_popup(self, popup: Any) -> None:
        try:
            self._provider.release_popup(popup)
        except Exception as e:
            logger.warning(f"Map provider failed to release popup: {e}")

    def label_for(self, asset: Asset) -> str:
        """The popup text add_marker() would render."""
        return self._format_label(asset)

    def handle_marker_click(self, asset_id: str) -> None:
        """Route a marker click to the selection handler."""
        if not self.is_ready or self._click_handler is None:
            logger.debug(f"Dropping click for {asset_id}: no active surface/handler")
            return
        self._click_handler(asset_id)

    def dispatch_click(self, marker_id: str) -> bool:
        """Route a view click on a rendered marker. False if the marker is gone."""
        if self._surface is None:
            return False
        return self._provider.dispatch_click(self._surface, marker_id)

    def render_state(self) -> Dict[str, Any]:
        return self._provider.render_state(self._surface)

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise SurfaceNotReadyError(f"Map surface is {self._state.value}")

    # ----------------------------------------------------------------
    # Teardown
    # ----------------------------------------------------------------

    def teardown(self) -> None:
        """Release the surface. Safe to call more than once."""
        if self._state is SurfaceState.RELEASED:
            return
        surface = self._surface
        self._surface = None
        self._pending = None
        self._state = SurfaceState.RELEASED
        self._click_handler = None
        self._ready_listeners = []
        self._failure_listeners = []

        if surface is not None:
            try:
                self._provider.release(surface)
            except Exception as e:
                logger.warning(f"Map provider failed to release surface: {e}")
        log_checkpoint("surface_released")


__all__ = [
    "MapProvider",
    "MapContainer",
    "MapSurfaceAdapter",
    "format_popup_label",
]

# ============================================================================
# MAP SURFACE ADAPTER TESTS
# ============================================================================
# STATUS: Tests - Surface lifecycle and marker calls
# PURPOSE: Verify deferred init, idempotent init, key checks and labels
# CREATED: 19 OCT 2026
# ============================================================================
"""
MapSurfaceAdapter Tests

The provider is a MagicMock; the MapLibre provider has its own tests
further down this file.

Run with:
    pytest tests/test_map_surface.py -v
"""

from unittest.mock import MagicMock

import pytest

from core.config import MapDefaults
from core.contracts import SurfaceState
from core.errors import SurfaceInitError, SurfaceNotReadyError
from core.models.asset import Asset
from core.models.surface import SurfaceOptions
from infrastructure.maplibre_provider import MapLibreProvider
from services.map_surface import (
    MapContainer,
    MapProvider,
    MapSurfaceAdapter,
    format_popup_label,
)


# ============================================================================
# HELPERS
# ============================================================================

def _make_asset(asset_id="a1", latitude=28.69, longitude=77.29):
    return Asset.from_record({
        "id": asset_id,
        "type": "Pump",
        "latitude": latitude,
        "longitude": longitude,
        "installationDate": "2023-04-12",
        "manufacturer": "Kirloskar",
        "model": "KP-40",
        "condition": "Good",
    })


def _make_adapter(api_key="test-key", provider=None):
    provider = provider or MagicMock(spec=MapProvider)
    adapter = MapSurfaceAdapter(provider, MapDefaults(api_key=api_key))
    return adapter, provider


# ============================================================================
# POPUP LABEL
# ============================================================================

class TestPopupLabel:

    def test_label_is_human_readable(self):
        label = format_popup_label(_make_asset())
        assert label == "Pump a1: Kirloskar KP-40 (Good)"
        assert "object" not in label.lower()

    def test_rejects_non_asset(self):
        with pytest.raises(TypeError):
            format_popup_label({"id": "a1"})


# ============================================================================
# INITIALIZATION
# ============================================================================

class TestInitialize:

    def test_mounted_container_initializes(self):
        adapter, provider = _make_adapter()
        provider.initialize.return_value = "surface"

        surface = adapter.initialize(MapContainer("map", mounted=True))

        assert surface == "surface"
        assert adapter.state is SurfaceState.READY
        options = provider.initialize.call_args.args[0]
        assert isinstance(options, SurfaceOptions)
        assert options.container == "map"
        assert options.center == (77.2881183, 28.690229)
        assert options.zoom == 16

    def test_second_initialize_is_noop(self):
        adapter, provider = _make_adapter()
        container = MapContainer("map", mounted=True)
        first = adapter.initialize(container)
        second = adapter.initialize(container)

        assert first is second
        assert provider.initialize.call_count == 1

    def test_unmounted_container_defers(self):
        adapter, provider = _make_adapter()
        container = MapContainer("map")

        assert adapter.initialize(container) is None
        assert adapter.state is SurfaceState.DEFERRED
        provider.initialize.assert_not_called()

        container.mark_mounted()

        assert adapter.state is SurfaceState.READY
        provider.initialize.assert_called_once()

    def test_deferred_initialize_twice_registers_once(self):
        adapter, provider = _make_adapter()
        container = MapContainer("map")
        adapter.initialize(container)
        adapter.initialize(container)

        container.mark_mounted()
        container.mark_mounted()

        assert provider.initialize.call_count == 1

    def test_missing_api_key_fails(self):
        adapter, provider = _make_adapter(api_key="  ")

        with pytest.raises(SurfaceInitError):
            adapter.initialize(MapContainer("map", mounted=True))

        assert adapter.state is SurfaceState.FAILED
        assert "API key" in adapter.last_error
        provider.initialize.assert_not_called()

    def test_provider_failure_wrapped(self):
        adapter, provider = _make_adapter()
        provider.initialize.side_effect = RuntimeError("tiles unreachable")

        with pytest.raises(SurfaceInitError, match="tiles unreachable"):
            adapter.initialize(MapContainer("map", mounted=True))
        assert adapter.state is SurfaceState.FAILED

    def test_deferred_failure_reported_to_listener(self):
        adapter, provider = _make_adapter()
        provider.initialize.side_effect = RuntimeError("bad key")
        failures = []
        adapter.add_failure_listener(failures.append)
        container = MapContainer("map")

        adapter.initialize(container)
        container.mark_mounted()

        assert adapter.state is SurfaceState.FAILED
        assert len(failures) == 1
        assert isinstance(failures[0], SurfaceInitError)

    def test_ready_listener_fires_once(self):
        adapter, _ = _make_adapter()
        calls = []
        adapter.add_ready_listener(lambda: calls.append("ready"))
        container = MapContainer("map", mounted=True)

        adapter.initialize(container)
        adapter.initialize(container)
        assert calls == ["ready"]

        adapter.add_ready_listener(lambda: calls.append("late"))
        assert calls == ["ready", "late"]

    def test_initialize_after_teardown_fails(self):
        adapter, _ = _make_adapter()
        adapter.initialize(MapContainer("map", mounted=True))
        adapter.teardown()
        with pytest.raises(SurfaceInitError):
            adapter.initialize(MapContainer("map", mounted=True))


# ============================================================================
# MARKERS
# ============================================================================

class TestMarkers:

    def _ready_adapter(self):
        adapter, provider = _make_adapter()
        provider.initialize.return_value = "surface"
        adapter.initialize(MapContainer("map", mounted=True))
        return adapter, provider

    def test_add_marker_uses_lng_lat_order_and_label(self):
        adapter, provider = self._ready_adapter()
        handle = adapter.add_marker(_make_asset(latitude=10.0, longitude=20.0))

        assert handle.asset_id == "a1"
        provider.add_popup.assert_called_once()
        assert provider.add_popup.call_args.args[0] == "Pump a1: Kirloskar KP-40 (Good)"
        args = provider.add_marker.call_args.args
        assert args[0] == "surface"
        assert args[1] == (20.0, 10.0)
        assert args[4] == {"color": "red", "anchor": "bottom", "offset": [0, 6]}

    def test_marker_before_ready_raises(self):
        adapter, _ = _make_adapter()
        with pytest.raises(SurfaceNotReadyError):
            adapter.add_marker(_make_asset())

    def test_update_marker_removes_then_adds(self):
        adapter, provider = self._ready_adapter()
        handle = adapter.add_marker(_make_asset())
        adapter.update_marker(handle, _make_asset(latitude=1.0))

        provider.remove_marker.assert_called_once_with("surface", handle.marker)
        assert provider.add_marker.call_count == 2

    def test_click_routes_to_handler(self):
        adapter, provider = self._ready_adapter()
        clicks = []
        adapter.set_click_handler(clicks.append)
        adapter.add_marker(_make_asset("a7"))

        on_click = provider.add_marker.call_args.args[3]
        on_click()
        assert clicks == ["a7"]

    def test_click_after_teardown_dropped(self):
        adapter, provider = self._ready_adapter()
        clicks = []
        adapter.set_click_handler(clicks.append)
        adapter.add_marker(_make_asset("a7"))
        on_click = provider.add_marker.call_args.args[3]

        adapter.teardown()
        on_click()
        assert clicks == []

    def test_teardown_idempotent(self):
        adapter, provider = self._ready_adapter()
        adapter.teardown()
        adapter.teardown()
        provider.release.assert_called_once_with("surface")
        assert adapter.state is SurfaceState.RELEASED

    def test_teardown_survives_release_failure(self):
        adapter, provider = self._ready_adapter()
        provider.release.side_effect = RuntimeError("gone")
        adapter.teardown()
        assert adapter.state is SurfaceState.RELEASED

    def test_failed_add_releases_popup(self):
        adapter, provider = self._ready_adapter()
        provider.add_marker.side_effect = RuntimeError("marker rejected")

        with pytest.raises(RuntimeError):
            adapter.add_marker(_make_asset())

        provider.release_popup.assert_called_once_with(provider.add_popup.return_value)

    def test_failed_add_reraises_when_popup_release_fails(self):
        adapter, provider = self._ready_adapter()
        provider.add_marker.side_effect = RuntimeError("marker rejected")
        provider.release_popup.side_effect = RuntimeError("popup gone")

        with pytest.raises(RuntimeError, match="marker rejected"):
            adapter.add_marker(_make_asset())


# ============================================================================
# MAPLIBRE PROVIDER
# ============================================================================

class TestMapLibreProvider:

    def _surface(self):
        provider = MapLibreProvider()
        adapter = MapSurfaceAdapter(provider, MapDefaults(api_key="k123"))
        adapter.initialize(MapContainer("map", mounted=True))
        return provider, adapter

    def test_render_state(self):
        provider, adapter = self._surface()
        adapter.add_marker(_make_asset())

        view = provider.render_state(adapter.surface)
        assert view["ready"] is True
        assert view["style"].endswith("?api_key=k123")
        assert view["center"] == [77.2881183, 28.690229]
        marker = view["markers"][0]
        assert marker["lng_lat"] == [77.29, 28.69]
        assert marker["popup"]["text"] == "Pump a1: Kirloskar KP-40 (Good)"
        assert marker["popup"]["offset"] == [0, -30]

    def test_dispatch_click(self):
        provider, adapter = self._surface()
        clicks = []
        adapter.set_click_handler(clicks.append)
        handle = adapter.add_marker(_make_asset("a3"))

        assert provider.dispatch_click(adapter.surface, handle.marker.marker_id) is True
        assert provider.dispatch_click(adapter.surface, "missing") is False
        assert clicks == ["a3"]

    def test_remove_marker_idempotent(self):
        provider, adapter = self._surface()
        handle = adapter.add_marker(_make_asset())
        adapter.remove_marker(handle)
        adapter.remove_marker(handle)
        assert provider.render_state(adapter.surface)["markers"] == []

    def test_release_forgets_surface(self):
        provider, adapter = self._surface()
        surface = adapter.surface
        adapter.teardown()
        assert provider.render_state(surface) == {"ready": False, "markers": []}

    def test_popup_text_must_be_string(self):
        provider = MapLibreProvider()
        with pytest.raises(TypeError):
            provider.add_popup({"id": "a1"}, {})


# ============================================================================
# DEFAULT VIEW CAPABILITIES
# ============================================================================

class HeadlessProvider(MapProvider):
    """Provider implementing only the required capabilities."""

    def initialize(self, options):
        return "surface"

    def add_popup(self, text, options):
        return text

    def add_marker(self, surface, lng_lat, popup, on_click, options):
        return object()

    def remove_marker(self, surface, marker):
        pass


class TestDefaultViewCapabilities:

    def test_render_state_reports_no_markers(self):
        adapter = MapSurfaceAdapter(HeadlessProvider(), MapDefaults(api_key="test-key"))
        assert adapter.render_state() == {"ready": False, "markers": []}

        adapter.initialize(MapContainer("map", mounted=True))
        adapter.add_marker(_make_asset())

        assert adapter.render_state() == {"ready": True, "markers": []}

    def test_view_click_not_delivered(self):
        adapter = MapSurfaceAdapter(HeadlessProvider(), MapDefaults(api_key="test-key"))
        assert adapter.dispatch_click("m1") is False

        adapter.initialize(MapContainer("map", mounted=True))
        assert adapter.dispatch_click("m1") is False

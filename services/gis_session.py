# ============================================================================
# GIS PAGE SESSION
# ============================================================================
# STATUS: Domain service - One mount -> unmount lifetime of the GIS page
# PURPOSE: Compose store, surface adapter, selection, editor and reconciler;
#          recover errors at the page boundary
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
GisPageSession

Owns every per-page object explicitly (no module-level map handle):

    AssetStore ──notify──> SyncReconciler ──> MapSurfaceAdapter ──> MapProvider
         ^                                          │ marker click
         │ upsert                                   v
    AssetEditor <──commit── SelectionController <───┘

Lifecycle:
    mount()            start reconciler, initialize (or defer) the surface,
                       load assets from the backend
    container_ready()  one-shot readiness signal from the view
    unmount()          stop notifications, release the surface, clear state

Error policy (page boundary):
    NetworkError         -> banner (dismissible), page keeps working
    StaleSelectionError  -> banner, selection reset to IDLE
    SurfaceInitError     -> map_error, form keeps working
    ValidationError      -> propagated to the caller for inline display;
                            the draft is kept
"""

import uuid
from typing import TYPE_CHECKING, Any, Dict, Optional

from core.config import Defaults, get_defaults
from core.contracts import CommitOperation
from core.errors import NetworkError, StaleSelectionError, SurfaceInitError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.asset import CommitResult, Draft
from services.asset_editor import AssetEditor
from services.asset_store import AssetStore
from services.map_surface import MapContainer, MapProvider, MapSurfaceAdapter
from services.reconciler import SyncReconciler
from services.selection import SelectionController

if TYPE_CHECKING:
    from infrastructure.backend_client import AssetBackendClient

logger = get_logger(__name__, ComponentType.SESSION)


class GisPageSession:
    """One GIS page session: map surface, asset registry and form."""

    def __init__(
        self,
        provider: MapProvider,
        backend: Optional["AssetBackendClient"] = None,
        defaults: Optional[Defaults] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._defaults = defaults or get_defaults()
        self._provider = provider
        self._backend = backend

        self.store = AssetStore()
        self.container = MapContainer(self._defaults.map.container_id)
        self.adapter = MapSurfaceAdapter(provider, self._defaults.map)
        self.editor = AssetEditor(self.store)
        self.selection = SelectionController(self.store, self.editor)
        self.reconciler = SyncReconciler(self.store, self.adapter, self._defaults.reconcile)

        self.adapter.set_click_handler(self.selection.select_from_map)
        self.adapter.add_failure_listener(self._on_surface_failed)

        self.mounted = False
        self.banner: Optional[str] = None
        self.map_error: Optional[str] = None

    @property
    def provider(self) -> MapProvider:
        return self._provider

    # ================================================================
    # LIFECYCLE
    # ================================================================

    async def mount(self) -> None:
        """Start the session. Never raises for surface or backend failures."""
        if self.mounted:
            return
        with log_context(session_id=self.session_id, operation="mount"):
            self.reconciler.start()
            self._initialize_surface()

            if self._backend is not None and self._defaults.backend.load_on_mount:
                try:
                    assets = await self._backend.list_assets()
                except NetworkError as e:
                    self._show_banner(f"Could not load assets: {e.message}")
                else:
                    self.store.load(assets)

            self.mounted = True
            log_checkpoint(
                "session_mounted",
                {"assets": len(self.store), "surface": self.adapter.state.value},
            )

    def container_ready(self) -> None:
        """Readiness signal from the view: the map container is in the DOM."""
        with log_context(session_id=self.session_id, operation="container_ready"):
            self.container.mark_mounted()

    def unmount(self) -> None:
        """Tear down. Late notifications after this are dropped."""
        if not self.mounted:
            return
        with log_context(session_id=self.session_id, operation="unmount"):
            self.reconciler.stop()
            self.adapter.teardown()
            self.container.mark_unmounted()
            self.selection.cancel()
            self.store.clear()
            self.mounted = False
            log_checkpoint("session_unmounted")

    def _initialize_surface(self) -> None:
        try:
            self.adapter.initialize(self.container)
        except SurfaceInitError as e:
            self._on_surface_failed(e)

    def _on_surface_failed(self, error: SurfaceInitError) -> None:
        self.map_error = str(error)
        logger.error(f"Map panel unavailable: {error}")

    # ================================================================
    # SELECTION
    # ================================================================

    def select_asset(self, asset_id: str) -> bool:
        """
        Marker click for asset_id, routed through the surface adapter.

        Returns True if the asset is now being edited.
        """
        with log_context(session_id=self.session_id, asset_id=asset_id):
            try:
                if self.adapter.is_ready:
                    self.adapter.handle_marker_click(asset_id)
                else:
                    self.selection.select_from_map(asset_id)
            except StaleSelectionError as e:
                self._show_banner(str(e))
                return False
            return self.selection.selected_id == asset_id

    def click_marker(self, marker_id: str) -> bool:
        """
        Browser click on a rendered marker (by provider marker id).

        Returns False if the marker no longer exists.
        """
        with log_context(session_id=self.session_id, operation="click_marker"):
            try:
                delivered = self.adapter.dispatch_click(marker_id)
            except StaleSelectionError as e:
                self._show_banner(str(e))
                return False
            if not delivered:
                self._show_banner("That marker is no longer on the map")
            return delivered

    # ================================================================
    # FORM
    # ================================================================

    def edit_field(self, field: str, value: Any) -> Draft:
        return self.selection.edit_field(field, value)

    def new_asset(self) -> Draft:
        return self.selection.new_asset()

    def cancel(self) -> None:
        self.selection.cancel()

    async def commit(self) -> CommitResult:
        """
        Commit the draft, then persist to the backend.

        Raises:
            ValidationError: from the editor; draft kept for correction.
        """
        with log_context(session_id=self.session_id, operation="commit"):
            result = self.selection.commit()

            if self._backend is not None and self._defaults.backend.persist_commits:
                try:
                    if result.operation is CommitOperation.CREATE:
                        await self._backend.create_asset(result.asset)
                    else:
                        await self._backend.update_asset(result.asset)
                except NetworkError as e:
                    self._show_banner(
                        f"Asset {result.asset.id} saved on the map but not on the server: {e.message}"
                    )
            return result

    async def delete_asset(self, asset_id: str) -> bool:
        """Remove an asset; its marker goes with the next reconciliation."""
        with log_context(session_id=self.session_id, asset_id=asset_id, operation="delete"):
            removed = self.store.remove(asset_id)
            self.selection.release(asset_id)
            if removed and self._backend is not None and self._defaults.backend.persist_commits:
                try:
                    await self._backend.delete_asset(asset_id)
                except NetworkError as e:
                    self._show_banner(f"Asset {asset_id} removed locally but not on the server: {e.message}")
            return removed

    # ================================================================
    # BANNER / VIEW STATE
    # ================================================================

    def _show_banner(self, message: str) -> None:
        self.banner = message
        logger.warning(message)

    def dismiss_banner(self) -> None:
        self.banner = None

    def view_state(self) -> Dict[str, Any]:
        """Everything the page needs to render map panel and form."""
        surface_view = self.adapter.render_state()
        return {
            "session_id": self.session_id,
            "mounted": self.mounted,
            "banner": self.banner,
            "map": {
                "state": self.adapter.state.value,
                "error": self.map_error,
                **surface_view,
            },
            "selection": {
                "state": self.selection.state.value,
                "selected_id": self.selection.selected_id,
                "form": self.selection.form_values(),
                "field_errors": dict(self.selection.last_errors),
                "submit_label": self.selection.submit_label,
                "commit_count": self.selection.commit_count,
            },
            "assets": [asset.to_record() for asset in self.store.list()],
            "reconciler": {
                "tracked": sorted(self.reconciler.tracked_ids()),
                "failed": sorted(self.reconciler.failed_ids()),
                "stats": self.reconciler.stats.to_dict(),
            },
        }


__all__ = ["GisPageSession"]

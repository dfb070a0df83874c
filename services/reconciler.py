# ============================================================================
# SYNC RECONCILER
# ============================================================================
# STATUS: Domain service - Keeps rendered markers in step with the store
# PURPOSE: Diff desired markers against rendered markers and apply the
#          minimal add/update/remove set to the map surface adapter
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
SyncReconciler

Runs on every AssetStore change notification:

    desired = {asset.id: asset for asset in store.list()}
    current = tracked {asset.id: MarkerHandle}

    desired - current  -> add_marker
    current - desired  -> remove_marker, drop from tracked
    both, snapshot differs or id upserted since last pass -> update_marker

A full clear-and-redraw would flicker markers and close open popups, so
only the difference is applied. A pass with no intervening store change
makes zero adapter calls (last-rendered snapshot kept per tracked id).

Ordering:
    Passes are not reentrant. A notification arriving mid-pass (e.g. a
    click handler upserting) sets a dirty flag; the running pass loops
    again once it completes.

Failures:
    Each adapter call is retried once immediately. A call that still
    fails degrades that single asset to "not rendered" (kept in
    failed with its snapshot) and the pass continues with the others.
    A failed id is retried when its rendered fields change or it is
    upserted again.
    A marker whose removal fails stays queued as stale and every later
    pass retries the removal. Its id is not redrawn until the old marker
    is gone.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from core.config import ReconcileDefaults
from core.contracts import StoreChangeKind
from core.errors import MarkerRenderError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.asset import Asset
from core.models.store_change import StoreChange
from core.models.surface import MarkerHandle, RenderSnapshot
from services.asset_store import AssetStore
from services.map_surface import MapSurfaceAdapter

logger = get_logger(__name__, ComponentType.RECONCILER)


@dataclass
class ReconcileStats:
    """Running totals of adapter calls made by the reconciler."""
    passes: int = 0
    added: int = 0
    updated: int = 0
    removed: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class SyncReconciler:
    """Aligns rendered markers with the current asset collection."""

    def __init__(
        self,
        store: AssetStore,
        adapter: MapSurfaceAdapter,
        defaults: Optional[ReconcileDefaults] = None,
    ):
        self._store = store
        self._adapter = adapter
        self._defaults = defaults or ReconcileDefaults()

        self._tracked: Dict[str, MarkerHandle] = {}
        self._snapshots: Dict[str, RenderSnapshot] = {}
        self._failed: Dict[str, RenderSnapshot] = {}
        self._stale: Dict[str, MarkerHandle] = {}
        self._touched: Set[str] = set()

        self._active = False
        self._running = False
        self._dirty = False
        self._unsubscribe: Optional[Callable[[], None]] = None

        self.stats = ReconcileStats()
        self.errors: List[MarkerRenderError] = []

    # ================================================================
    # LIFECYCLE
    # ================================================================

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Subscribe to the store and reconcile once the surface is ready."""
        if self._active:
            return
        self._active = True
        self._unsubscribe = self._store.subscribe(self._on_store_change)
        self._adapter.add_ready_listener(self._on_surface_ready)

    def stop(self) -> None:
        """
        Stop receiving notifications and forget tracked markers.

        Handles become meaningless once the surface is torn down; late
        notifications after stop() are ignored.
        """
        self._active = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._tracked.clear()
        self._snapshots.clear()
        self._failed.clear()
        self._stale.clear()
        self._touched.clear()
        self._dirty = False

    # ================================================================
    # INSPECTION
    # ================================================================

    def tracked_ids(self) -> Set[str]:
        return set(self._tracked)

    def failed_ids(self) -> Set[str]:
        """Ids not rendered as stored: failed add/update or a marker still awaiting removal."""
        return set(self._failed) | set(self._stale)

    def stale_ids(self) -> Set[str]:
        return set(self._stale)

    def handle_for(self, asset_id: str) -> Optional[MarkerHandle]:
        return self._tracked.get(asset_id)

    def snapshot_for(self, asset_id: str) -> Optional[RenderSnapshot]:
        return self._snapshots.get(asset_id)

    # ================================================================
    # RECONCILIATION
    # ================================================================

    def _on_store_change(self, change: StoreChange) -> None:
        if not self._active:
            return
        if change.kind is StoreChangeKind.UPSERTED:
            self._touched.update(change.asset_ids)
        self.reconcile()

    def _on_surface_ready(self) -> None:
        if self._active:
            self.reconcile()

    def reconcile(self) -> None:
        """
        Bring rendered markers in line with the store.

        No-op while stopped or while the surface is not ready. Called
        during a running pass, it only queues another pass.
        """
        if not self._active:
            return
        if self._running:
            self._dirty = True
            return
        if not self._adapter.is_ready:
            logger.debug("Surface not ready, reconciliation deferred")
            return

        self._running = True
        passes = 0
        try:
            while True:
                self._dirty = False
                passes += 1
                self._run_pass()
                if not self._dirty:
                    break
                if passes >= self._defaults.max_passes:
                    logger.error(
                        f"Store still changing after {passes} reconciliation passes, giving up"
                    )
                    break
        finally:
            self._running = False

        log_checkpoint(
            "reconcile_pass",
            {
                "passes": passes,
                "tracked": len(self._tracked),
                "failed": len(self._failed),
                "stale": len(self._stale),
            },
        )

    def _run_pass(self) -> None:
        desired: Dict[str, Asset] = {asset.id: asset for asset in self._store.list()}
        touched, self._touched = self._touched, set()
        self.stats.passes += 1

        for asset_id in [i for i in self._tracked if i not in desired]:
            self._stale[asset_id] = self._tracked.pop(asset_id)
            self._snapshots.pop(asset_id, None)

        for asset_id in [i for i in self._failed if i not in desired]:
            del self._failed[asset_id]

        # Removals first so a recreated id never has two markers. A stale
        # marker stays queued until the surface confirms its removal.
        for asset_id, handle in list(self._stale.items()):
            ok, _ = self._apply(asset_id, "remove_marker", self._adapter.remove_marker, handle)
            if ok:
                del self._stale[asset_id]
                self.stats.removed += 1

        for asset_id, asset in desired.items():
            if asset_id in self._stale:
                continue

            snapshot = RenderSnapshot.of(asset, self._adapter.label_for(asset))
            forced = asset_id in touched
            previous = self._tracked.get(asset_id)

            if previous is not None:
                if not forced and self._snapshots.get(asset_id) == snapshot:
                    continue
                ok, handle = self._apply(
                    asset_id, "update_marker",
                    self._adapter.update_marker, previous, asset,
                )
                if ok:
                    self.stats.updated += 1
            else:
                if not forced and self._failed.get(asset_id) == snapshot:
                    continue
                ok, handle = self._apply(asset_id, "add_marker", self._adapter.add_marker, asset)
                if ok:
                    self.stats.added += 1

            if ok:
                self._tracked[asset_id] = handle
                self._snapshots[asset_id] = snapshot
                self._failed.pop(asset_id, None)
            else:
                self._tracked.pop(asset_id, None)
                self._snapshots.pop(asset_id, None)
                self._failed[asset_id] = snapshot
                if previous is not None:
                    # The old marker may have survived the failed update
                    self._stale[asset_id] = previous

    def _apply(
        self,
        asset_id: str,
        operation: str,
        call: Callable[..., Any],
        *args: Any,
    ) -> Tuple[bool, Any]:
        """Run one adapter call, retrying immediately on failure."""
        attempts = 1 + max(self._defaults.retry_attempts, 0)
        last_error: Optional[Exception] = None

        with log_context(asset_id=asset_id, operation=operation):
            for attempt in range(1, attempts + 1):
                try:
                    return True, call(*args)
                except Exception as e:
                    last_error = e
                    logger.warning(f"{operation} failed (attempt {attempt}/{attempts}): {e}")

            error = MarkerRenderError(asset_id, operation, last_error)
            self.errors.append(error)
            self.stats.failed += 1
            logger.error(f"Marker not rendered: {error}")
        return False, None


__all__ = ["SyncReconciler", "ReconcileStats"]

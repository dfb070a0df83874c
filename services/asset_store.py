# ============================================================================
# ASSET STORE
# ============================================================================
# STATUS: Domain service - Authoritative in-memory asset collection
# PURPOSE: Hold registered assets and notify listeners after every mutation
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
AssetStore

Pure data: no rendering knowledge, no persistence. Callers persist to the
backend themselves (see GisPageSession).

Every successful mutation emits exactly one StoreChange to subscribers,
synchronously, after the collection has been updated. Failed mutations
(validation errors, removing an unknown id) emit nothing.

Pattern: dict keyed by id (insertion ordered), listeners held in a list,
subscribe() returns the matching unsubscribe callable.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from core.contracts import StoreChangeKind
from core.errors import ValidationError
from core.logging import ComponentType, get_logger
from core.models.asset import Asset
from core.models.store_change import StoreChange

logger = get_logger(__name__, ComponentType.STORE)

StoreListener = Callable[[StoreChange], None]


class AssetStore:
    """Authoritative in-memory collection of assets, keyed by id."""

    def __init__(self, assets: Optional[Iterable[Asset]] = None):
        self._assets: Dict[str, Asset] = {}
        self._listeners: List[StoreListener] = []
        for asset in assets or ():
            coerced = self._coerce(asset)
            self._assets[coerced.id] = coerced

    # ================================================================
    # QUERIES
    # ================================================================

    def list(self) -> List[Asset]:
        """All assets in insertion order."""
        return list(self._assets.values())

    def get(self, asset_id: str) -> Optional[Asset]:
        return self._assets.get(asset_id)

    def contains(self, asset_id: str) -> bool:
        return asset_id in self._assets

    def ids(self) -> List[str]:
        return list(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._assets

    # ================================================================
    # MUTATIONS
    # ================================================================

    def upsert(self, asset: Union[Asset, Dict[str, Any]]) -> Asset:
        """
        Insert if id is unused, else replace the whole record.

        Raises:
            ValidationError: invalid coordinates or enum fields. The store
                is left untouched and no notification is sent.
        """
        coerced = self._coerce(asset)
        existed = coerced.id in self._assets
        self._assets[coerced.id] = coerced

        logger.debug(
            f"{'Replaced' if existed else 'Inserted'} asset {coerced.id}",
        )
        self._emit(StoreChange(kind=StoreChangeKind.UPSERTED, asset_ids=(coerced.id,)))
        return coerced

    def remove(self, asset_id: str) -> bool:
        """Remove by id. Returns False (not an error) if the id is unknown."""
        if asset_id not in self._assets:
            return False
        del self._assets[asset_id]
        logger.debug(f"Removed asset {asset_id}")
        self._emit(StoreChange(kind=StoreChangeKind.REMOVED, asset_ids=(asset_id,)))
        return True

    def load(self, assets: Iterable[Union[Asset, Dict[str, Any]]]) -> int:
        """
        Replace the whole collection (initial load from the backend).

        All records are validated before the collection is swapped, so a
        bad record leaves the store as it was.
        """
        loaded: Dict[str, Asset] = {}
        for asset in assets:
            coerced = self._coerce(asset)
            loaded[coerced.id] = coerced

        self._assets = loaded
        logger.info(f"Loaded {len(loaded)} assets")
        self._emit(StoreChange(kind=StoreChangeKind.LOADED, asset_ids=tuple(loaded)))
        return len(loaded)

    def clear(self) -> None:
        """Drop every asset. No notification if already empty."""
        if not self._assets:
            return
        removed = tuple(self._assets)
        self._assets = {}
        self._emit(StoreChange(kind=StoreChangeKind.CLEARED, asset_ids=removed))

    # ================================================================
    # NOTIFICATIONS
    # ================================================================

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that unsubscribes the listener (safe to call twice).
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _emit(self, change: StoreChange) -> None:
        # Copy: a listener may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(change)

    @staticmethod
    def _coerce(asset: Union[Asset, Dict[str, Any]]) -> Asset:
        if isinstance(asset, Asset):
            return asset
        if isinstance(asset, dict):
            return Asset.from_record(asset)
        raise ValidationError(
            f"Expected Asset or record dict, got {type(asset).__name__}",
        )


__all__ = ["AssetStore", "StoreListener"]

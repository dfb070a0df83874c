# ============================================================================
# STORE CHANGE NOTIFICATION
# ============================================================================
# STATUS: Domain model - Asset store change notification payload
# PURPOSE: Tell the reconciler what kind of mutation happened and to which ids
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
StoreChange

Emitted by AssetStore after every successful mutation. The reconciler
recomputes the full diff on every notification; asset_ids only tells it
which ids were explicitly upserted (those are re-rendered even if their
rendered fields did not change).
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from core.contracts import StoreChangeKind


class StoreChange(BaseModel):
    """A single asset store mutation."""

    model_config = ConfigDict(frozen=True)

    kind: StoreChangeKind
    asset_ids: Tuple[str, ...] = ()


__all__ = ["StoreChange"]

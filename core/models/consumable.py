# ============================================================================
# CONSUMABLE & PANCHAYAT MODELS
# ============================================================================
# STATUS: Boundary model - Records of the consumables REST endpoints
# PURPOSE: Typed shapes for /consumables and /panchayats responses
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Consumable / Panchayat Models

Only used by AssetBackendClient. The consumables page itself is not part
of this service; these models exist so the client returns typed records.
Backend ids arrive as "_id".
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Consumable(BaseModel):
    """Consumable inventory item tracked per panchayat."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    item_name: str
    current_quantity: float = Field(default=0, ge=0)
    minimum_threshold: float = Field(default=0, ge=0)
    replenishment_due_date: Optional[str] = None
    panchayat_id: str

    @property
    def needs_replenishment(self) -> bool:
        return self.current_quantity <= self.minimum_threshold


class Panchayat(BaseModel):
    """Village council that owns consumables."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str


__all__ = ["Consumable", "Panchayat"]

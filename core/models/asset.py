# ============================================================================
# ASSET MODEL
# ============================================================================
# STATUS: Domain model - Registered infrastructure asset and its form draft
# PURPOSE: Validated asset value object plus the raw working copy under edit
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Asset, Draft, CommitResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Asset Model

Asset is the committed, validated record held by the AssetStore. It is
immutable: the only way to change an asset is to build a new one and
upsert it (full-record replace keyed by id).

Draft is the mutable working copy behind the form. It holds raw form
values (strings straight from the inputs) so that a half-typed latitude
survives a failed commit. Drafts are turned into Assets by AssetEditor.

Wire shape (REST boundary):
    {"id", "type", "latitude", "longitude", "installationDate",
     "manufacturer", "model", "capacity", "condition"}
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.contracts import AssetCondition, AssetType, CommitOperation
from core.errors import ValidationError


# Form/wire field names in display order
ASSET_FIELDS = (
    "id",
    "type",
    "latitude",
    "longitude",
    "installationDate",
    "manufacturer",
    "model",
    "capacity",
    "condition",
)


def _errors_by_field(exc: PydanticValidationError) -> Dict[str, str]:
    """Flatten pydantic errors to {field: first message}."""
    result: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        name = str(loc[0])
        if name not in result:
            result[name] = error.get("msg", "invalid value")
    return result


class Asset(BaseModel):
    """
    A registered physical infrastructure asset.

    Identity: id (stable for the lifetime of the asset)
    Location: WGS84 degrees, lat in [-90, 90], lon in [-180, 180]
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, max_length=128)
    type: AssetType
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    installation_date: date = Field(..., alias="installationDate")
    manufacturer: str = ""
    model: str = ""
    capacity: str = ""
    condition: AssetCondition

    @field_validator("id", mode="before")
    @classmethod
    def _strip_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> AssetType:
        parsed = AssetType.parse(value)
        if parsed is None:
            raise ValueError(f"must be one of {', '.join(AssetType.choices())}")
        return parsed

    @field_validator("condition", mode="before")
    @classmethod
    def _parse_condition(cls, value: Any) -> AssetCondition:
        parsed = AssetCondition.parse(value)
        if parsed is None:
            raise ValueError(f"must be one of {', '.join(AssetCondition.choices())}")
        return parsed

    @field_validator("manufacturer", "model", "capacity", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    # ----------------------------------------------------------------
    # Construction
    # ----------------------------------------------------------------

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Asset":
        """
        Build an Asset from a REST record or form dict.

        Raises:
            ValidationError: with field_errors keyed by wire field name.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            field_errors = _errors_by_field(e)
            raise ValidationError(
                f"Invalid asset: {', '.join(sorted(field_errors))}",
                field_errors=field_errors,
            ) from e

    def to_record(self) -> Dict[str, Any]:
        """REST shape: camelCase keys, ISO date, enum values."""
        return self.model_dump(mode="json", by_alias=True)

    # ----------------------------------------------------------------
    # Presentation
    # ----------------------------------------------------------------

    def display_label(self) -> str:
        """
        One-line human-readable label, e.g. "Pump a1: Kirloskar KP-40 (Good)".
        """
        label = f"{self.type.display_name} {self.id}"
        make = " ".join(part for part in (self.manufacturer.strip(), self.model.strip()) if part)
        if make:
            label = f"{label}: {make}"
        return f"{label} ({self.condition.value})"

    @property
    def lng_lat(self) -> tuple:
        """(longitude, latitude), the order map libraries expect."""
        return (self.longitude, self.latitude)


class Draft(BaseModel):
    """
    Mutable working copy of zero-or-one asset.

    Values are kept exactly as typed. source_id is the id of the store
    entry this draft was copied from (None for a brand-new asset); it is
    informational only, create vs update is decided at commit time.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_id: Optional[str] = None

    id: Any = ""
    type: Any = ""
    latitude: Any = ""
    longitude: Any = ""
    installation_date: Any = Field(default="", alias="installationDate")
    manufacturer: Any = ""
    model: Any = ""
    capacity: Any = ""
    condition: Any = ""

    @classmethod
    def blank(cls) -> "Draft":
        """The new-asset template."""
        return cls()

    @classmethod
    def from_asset(cls, asset: Asset) -> "Draft":
        """Copy an asset's fields into a fresh draft."""
        return cls(
            source_id=asset.id,
            id=asset.id,
            type=asset.type.value,
            latitude=asset.latitude,
            longitude=asset.longitude,
            installation_date=asset.installation_date.isoformat(),
            manufacturer=asset.manufacturer,
            model=asset.model,
            capacity=asset.capacity,
            condition=asset.condition.value,
        )

    def form_values(self) -> Dict[str, Any]:
        """Field values keyed by form field name, None rendered as ""."""
        values = self.model_dump(by_alias=True, exclude={"source_id"})
        return {name: ("" if values.get(name) is None else values.get(name)) for name in ASSET_FIELDS}


class CommitResult(BaseModel):
    """Outcome of a successful commit."""

    operation: CommitOperation
    asset: Asset


__all__ = ["ASSET_FIELDS", "Asset", "Draft", "CommitResult"]

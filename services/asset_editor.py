# ============================================================================
# ASSET EDITOR (FORM BINDING)
# ============================================================================
# STATUS: Domain service - Form field edits -> draft -> committed asset
# PURPOSE: Map form fields onto the draft, validate locally, and commit
#          full asset records to the store
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
AssetEditor

Pure mapping between the form and the Draft:

    form field "installationDate"  ->  draft.installation_date
    form field "latitude"          ->  draft.latitude (kept as typed)

Local validation runs before anything reaches the store: required fields
non-empty, latitude/longitude parseable and in range, date parseable,
enums valid. All problems are collected into one ValidationError keyed
by form field so each message can be shown beside its input.

On commit a full Asset (never a partial patch) is built and upserted.
The store change notification drives marker reconciliation; the editor
never touches the map.
"""

import math
from datetime import date, datetime
from typing import Any, Dict, Optional

from core.contracts import AssetCondition, AssetType, CommitOperation
from core.errors import ValidationError
from core.logging import ComponentType, get_logger
from core.models.asset import Asset, CommitResult, Draft
from services.asset_store import AssetStore

logger = get_logger(__name__, ComponentType.EDITOR)


# Form field name -> Draft attribute
FORM_FIELDS: Dict[str, str] = {
    "id": "id",
    "type": "type",
    "latitude": "latitude",
    "longitude": "longitude",
    "installationDate": "installation_date",
    "manufacturer": "manufacturer",
    "model": "model",
    "capacity": "capacity",
    "condition": "condition",
}

# snake_case and "asset_"-prefixed spellings used by some form posts
FIELD_ALIASES: Dict[str, str] = {
    "installation_date": "installationDate",
    "asset_id": "id",
    "asset_type": "type",
}

REQUIRED_FIELDS = ("id", "type", "latitude", "longitude", "installationDate", "condition")

FORM_LABELS: Dict[str, str] = {
    "id": "Asset ID",
    "type": "Asset Type",
    "latitude": "Latitude",
    "longitude": "Longitude",
    "installationDate": "Installation Date",
    "manufacturer": "Manufacturer",
    "model": "Model",
    "capacity": "Capacity",
    "condition": "Condition",
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_coordinate(value: Any, low: float, high: float) -> float:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValueError("must be a number")
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    if not low <= number <= high:
        raise ValueError(f"must be between {low:g} and {high:g}")
    return number


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError("must be a date (YYYY-MM-DD)")


class AssetEditor:
    """Form binding and commit path for asset drafts."""

    def __init__(self, store: AssetStore):
        self._store = store

    # ================================================================
    # FIELD MAPPING
    # ================================================================

    @staticmethod
    def resolve_field(field: str) -> str:
        """
        Normalize a form field name.

        Raises:
            ValidationError: unknown field.
        """
        name = FIELD_ALIASES.get(field, field)
        if name not in FORM_FIELDS:
            raise ValidationError(f"Unknown form field '{field}'", field_errors={field: "unknown field"})
        return name

    def apply_field(self, draft: Draft, field: str, value: Any) -> Draft:
        """Write one form value into the draft, exactly as typed."""
        name = self.resolve_field(field)
        setattr(draft, FORM_FIELDS[name], value)
        return draft

    # ================================================================
    # VALIDATION
    # ================================================================

    def validate(self, draft: Optional[Draft]) -> Asset:
        """
        Build a full Asset from the draft.

        Raises:
            ValidationError: one entry per offending form field.
        """
        if draft is None:
            raise ValidationError("Nothing to commit: no asset is being edited")

        values = draft.form_values()
        errors: Dict[str, str] = {}

        for name in REQUIRED_FIELDS:
            if _is_blank(values[name]):
                errors[name] = f"{FORM_LABELS[name]} is required"

        parsed: Dict[str, Any] = {
            "id": str(values["id"]).strip(),
            "manufacturer": str(values["manufacturer"]).strip(),
            "model": str(values["model"]).strip(),
            "capacity": str(values["capacity"]).strip(),
        }

        if "type" not in errors:
            asset_type = AssetType.parse(values["type"])
            if asset_type is None:
                errors["type"] = f"Asset Type must be one of {', '.join(AssetType.choices())}"
            parsed["type"] = asset_type

        if "condition" not in errors:
            condition = AssetCondition.parse(values["condition"])
            if condition is None:
                errors["condition"] = f"Condition must be one of {', '.join(AssetCondition.choices())}"
            parsed["condition"] = condition

        for name, low, high in (("latitude", -90.0, 90.0), ("longitude", -180.0, 180.0)):
            if name in errors:
                continue
            try:
                parsed[name] = _parse_coordinate(values[name], low, high)
            except ValueError as e:
                errors[name] = f"{FORM_LABELS[name]} {e}"

        if "installationDate" not in errors:
            try:
                parsed["installationDate"] = _parse_date(values["installationDate"])
            except ValueError as e:
                errors["installationDate"] = f"Installation Date {e}"

        if errors:
            raise ValidationError(
                f"Please fix: {', '.join(FORM_LABELS[name] for name in errors)}",
                field_errors=errors,
            )

        # Model-level checks (length limits etc.) still apply
        return Asset.from_record(parsed)

    # ================================================================
    # COMMIT
    # ================================================================

    def commit(self, draft: Optional[Draft]) -> CommitResult:
        """
        Validate and upsert the draft as a full record.

        Create vs update is keyed strictly on whether the draft's id is
        already in the store at commit time.
        """
        asset = self.validate(draft)
        operation = (
            CommitOperation.UPDATE if self._store.contains(asset.id) else CommitOperation.CREATE
        )

        if draft is not None and draft.source_id and draft.source_id != asset.id:
            logger.info(
                f"Draft copied from {draft.source_id} committed under id {asset.id} "
                f"({operation.value})"
            )

        stored = self._store.upsert(asset)
        logger.info(f"Committed asset {stored.id} ({operation.value})")
        return CommitResult(operation=operation, asset=stored)


__all__ = [
    "AssetEditor",
    "FORM_FIELDS",
    "FORM_LABELS",
    "REQUIRED_FIELDS",
]

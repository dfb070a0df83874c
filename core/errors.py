# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Exceptions raised by the GIS core
# PURPOSE: One exception type per recovery policy at the page boundary
# CREATED: 19 OCT 2026
# ============================================================================
"""
GIS Error Taxonomy

    GisError
    ├── ValidationError        bad field value, reported inline, draft kept
    ├── StaleSelectionError    marker referenced an id no longer in the store
    ├── SurfaceInitError       map provider unreachable or key invalid
    ├── SurfaceNotReadyError   marker call before ready / after teardown
    ├── MarkerRenderError      adapter call failed during reconciliation
    └── NetworkError           backend REST call failed

ValidationError here is the domain error, not pydantic's. Pydantic
failures are converted at model construction (see core.models.asset).
"""

from typing import Dict, Optional


class GisError(Exception):
    """Base class for all GIS core errors."""


class ValidationError(GisError):
    """
    A field value failed validation.

    field_errors maps form field name -> message, so the page can show
    each message beside the offending field.
    """

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors: Dict[str, str] = dict(field_errors or {})

    def to_dict(self) -> Dict[str, object]:
        return {"error": "validation_error", "message": self.message, "field_errors": self.field_errors}


class StaleSelectionError(GisError):
    """A marker click referenced an asset id that is not in the store."""

    def __init__(self, asset_id: str):
        super().__init__(f"Asset '{asset_id}' is no longer in the registry")
        self.asset_id = asset_id


class SurfaceInitError(GisError):
    """The map surface could not be created."""


class SurfaceNotReadyError(GisError):
    """Marker operation attempted while the surface is not ready."""


class MarkerRenderError(GisError):
    """An add/update/remove marker call failed after retry."""

    def __init__(self, asset_id: str, operation: str, cause: Exception):
        super().__init__(f"{operation} failed for asset '{asset_id}': {cause}")
        self.asset_id = asset_id
        self.operation = operation
        self.cause = cause


class NetworkError(GisError):
    """A backend REST call failed (unreachable, timeout, or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


__all__ = [
    "GisError",
    "ValidationError",
    "StaleSelectionError",
    "SurfaceInitError",
    "SurfaceNotReadyError",
    "MarkerRenderError",
    "NetworkError",
]

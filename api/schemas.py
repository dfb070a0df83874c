# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for GIS API validation
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the GIS page API. The full page state is
returned as a plain dict (GisPageSession.view_state()) so the view can
re-render from a single payload after every action.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from core.contracts import CommitOperation


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class FieldEditRequest(BaseModel):
    """One form field change."""
    field: str = Field(..., min_length=1, max_length=64, description="Form field name")
    value: Any = Field(None, description="Raw value as typed in the form")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"field": "latitude", "value": "28.70"},
                {"field": "installationDate", "value": "2024-03-01"},
            ]
        }
    }


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class CommitResponse(BaseModel):
    """Result of a successful commit plus the refreshed page state."""
    operation: CommitOperation
    asset: Dict[str, Any]
    state: Dict[str, Any]


class HealthResponse(BaseModel):
    """Service health."""
    status: str
    service: str
    version: str
    session_id: Optional[str] = None
    surface_state: Optional[str] = None
    asset_count: int = 0

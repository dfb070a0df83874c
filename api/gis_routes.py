# ============================================================================
# GIS ROUTES
# ============================================================================
# STATUS: Core - GIS page session HTTP endpoints
# PURPOSE: HTTP API the browser view uses to drive the page session
# CREATED: 19 OCT 2026
# ============================================================================
"""
GIS Routes

Endpoints (mounted under /api/v1):
- GET    /gis/state                       - Full page state (map, form, banner)
- GET    /gis/assets                      - Registered assets
- POST   /gis/container-ready             - Map container is in the DOM
- POST   /gis/select/{asset_id}           - Select an asset (marker click by id)
- POST   /gis/markers/{marker_id}/click   - Marker click by rendered marker id
- POST   /gis/draft/fields                - Form field edit
- POST   /gis/draft/new                   - Start a blank new-asset draft
- POST   /gis/draft/commit                - Submit the form
- POST   /gis/draft/cancel                - Discard the draft
- DELETE /gis/assets/{asset_id}           - Delete an asset
- POST   /gis/banner/dismiss              - Dismiss the error banner
- GET    /gis/health                      - Health check

ValidationError -> 422 with per-field messages. Everything else is
recovered by the session and reported through the state payload.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from __version__ import __version__
from api.schemas import CommitResponse, FieldEditRequest, HealthResponse
from core.errors import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gis", tags=["GIS"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_session = None


def set_gis_session(session) -> None:
    """Called by main.py at startup to inject the page session."""
    global _session
    _session = session


def _get_session():
    """Get the page session, raising 503 if not mounted."""
    if _session is None:
        raise HTTPException(503, "GIS session not initialized")
    return _session


def _validation_error(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=e.to_dict())


# ============================================================================
# STATE
# ============================================================================

@router.get("/state")
async def get_state() -> Dict[str, Any]:
    """Map panel, form, banner and reconciliation state."""
    return _get_session().view_state()


@router.get("/assets")
async def list_assets() -> List[Dict[str, Any]]:
    """Registered assets in REST record shape."""
    return [asset.to_record() for asset in _get_session().store.list()]


@router.post("/container-ready")
async def container_ready() -> Dict[str, Any]:
    """One-shot readiness signal; triggers deferred map initialization."""
    session = _get_session()
    session.container_ready()
    return session.view_state()


@router.post("/banner/dismiss")
async def dismiss_banner() -> Dict[str, Any]:
    session = _get_session()
    session.dismiss_banner()
    return session.view_state()


# ============================================================================
# SELECTION
# ============================================================================

@router.post("/select/{asset_id}")
async def select_asset(asset_id: str) -> Dict[str, Any]:
    """
    Select an asset for editing.

    A stale id resets the selection and sets the banner; it is not an
    HTTP error.
    """
    session = _get_session()
    session.select_asset(asset_id)
    return session.view_state()


@router.post("/markers/{marker_id}/click")
async def click_marker(marker_id: str) -> Dict[str, Any]:
    session = _get_session()
    session.click_marker(marker_id)
    return session.view_state()


# ============================================================================
# FORM
# ============================================================================

@router.post("/draft/fields")
async def edit_field(request: FieldEditRequest) -> Dict[str, Any]:
    session = _get_session()
    try:
        session.edit_field(request.field, request.value)
    except ValidationError as e:
        raise _validation_error(e)
    return session.view_state()


@router.post("/draft/new")
async def new_draft() -> Dict[str, Any]:
    session = _get_session()
    session.new_asset()
    return session.view_state()


@router.post("/draft/cancel")
async def cancel_draft() -> Dict[str, Any]:
    session = _get_session()
    session.cancel()
    return session.view_state()


@router.post("/draft/commit", response_model=CommitResponse)
async def commit_draft() -> CommitResponse:
    """
    Submit the form: create if the draft id is new, else update.

    On 422 the draft is kept; field_errors says which inputs to fix.
    """
    session = _get_session()
    try:
        result = await session.commit()
    except ValidationError as e:
        raise _validation_error(e)

    logger.info(f"Asset {result.asset.id} committed ({result.operation.value})")
    return CommitResponse(
        operation=result.operation,
        asset=result.asset.to_record(),
        state=session.view_state(),
    )


@router.delete("/assets/{asset_id}")
async def delete_asset(asset_id: str) -> Dict[str, Any]:
    session = _get_session()
    removed = await session.delete_asset(asset_id)
    if not removed:
        raise HTTPException(404, f"Asset {asset_id} not found")
    return session.view_state()


# ============================================================================
# HEALTH
# ============================================================================

@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness plus a summary of the page session."""
    if _session is None:
        return HealthResponse(status="starting", service="gis-asset-registry", version=__version__)
    return HealthResponse(
        status="healthy" if _session.mounted else "unmounted",
        service="gis-asset-registry",
        version=__version__,
        session_id=_session.session_id,
        surface_state=_session.adapter.state.value,
        asset_count=len(_session.store),
    )

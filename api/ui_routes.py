"""
UI Routes - Jinja2 template rendering for the GIS page.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from __version__ import __version__
from core.config import get_defaults
from core.contracts import AssetCondition, AssetType
from services.asset_editor import FORM_LABELS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ui", tags=["ui"])

# Initialize templates
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# ============================================================================
# HELPERS
# ============================================================================

def get_base_context(request: Request, nav_active: str = "") -> dict:
    """Build base context for all templates."""
    return {
        "request": request,
        "nav_active": nav_active,
        "version": __version__,
    }


def form_context() -> dict:
    """Select options and labels for the asset form."""
    return {
        "form_labels": FORM_LABELS,
        "required_fields": REQUIRED_FIELDS,
        "asset_types": [(t.value, t.display_name) for t in AssetType],
        "asset_conditions": AssetCondition.choices(),
    }


# ============================================================================
# PAGES
# ============================================================================

@router.get("", include_in_schema=False)
async def ui_root():
    return RedirectResponse(url="/ui/gis")


@router.get("/gis", response_class=HTMLResponse)
async def gis_page(request: Request):
    """GIS-based asset management page: map panel and asset form."""
    map_defaults = get_defaults().map
    context = get_base_context(request, nav_active="gis")
    context.update(form_context())
    context.update({
        "container_id": map_defaults.container_id,
        "api_base": "/api/v1/gis",
    })
    return templates.TemplateResponse(request, "gis.html", context)

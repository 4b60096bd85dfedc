"""
Dashboard page API endpoint
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api.dependencies import get_snapshot_service
from app.config import settings
from app.core.snapshot import VRAMSnapshotService

router = APIRouter(tags=["dashboard"])
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
def view_dashboard(
    request: Request,
    service: VRAMSnapshotService = Depends(get_snapshot_service)
):
    """
    Render loaded models and vRAM usage of the Ollama pod

    Plain def: the pod exec blocks, so FastAPI runs this in its threadpool.
    Data-layer failures render as an error banner, never as a 5xx.
    """
    result = service.handle_snapshot_request()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "result": result,
            # fixed page framing; the budget itself is all zero on failure
            "total_vram_gib": service.total_vram_gib,
            "node_type": settings.NODE_TYPE,
            "edit_url": settings.EDIT_URL,
        }
    )

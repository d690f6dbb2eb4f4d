"""Runtime article pages rendered into the app shell."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from kubesite.services.viewer import Navigator

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Pages"])

_ERROR_STATUS = {"not_found": 404, "parse_failure": 500}


@router.get("/learn/{slug}", response_class=HTMLResponse, summary="Day-1 Basics article")
@router.get("/ops/{slug}", response_class=HTMLResponse, summary="Day-2 Operations article")
@router.get("/blog/{slug}", response_class=HTMLResponse, summary="Blog article")
@limiter.limit("60/minute")
async def article_page(request: Request, slug: str) -> HTMLResponse:
    """Load the article for the requested path and return the patched app shell.

    The content is taken from the pre-rendered snapshot when one exists and
    from the markdown source otherwise.  Missing or unrenderable content still
    returns a full page with navigation and a visible message.
    """
    location = request.url.path
    logger.info("Article request received", extra={"path": location})

    navigator = Navigator()
    state = await navigator.navigate(location)

    status_code = 200
    if state is not None and state.status == "error":
        status_code = _ERROR_STATUS.get(state.error_kind, 500)
    return HTMLResponse(navigator.html(), status_code=status_code)

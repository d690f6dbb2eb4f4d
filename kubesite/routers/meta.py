"""JSON page metadata for clients that patch their own document head."""

import logging

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from kubesite.models.document import Category
from kubesite.models.page_meta import PageMeta
from kubesite.services.errors import ContentNotFound, ParseFailure
from kubesite.services.normalizer import article_path
from kubesite.services.seo import build_page_meta
from kubesite.services.sources import resolve_content

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api", tags=["Metadata"])


@router.get(
    "/meta/{category}/{slug}",
    response_model=PageMeta,
    summary="Head metadata for one article",
    description=(
        "Returns the canonical URL, Open Graph and Twitter values and the "
        "JSON-LD objects for the article, exactly as the pre-renderer writes "
        "them into the static snapshot."
    ),
)
@limiter.limit("60/minute")
async def page_meta(request: Request, category: Category, slug: str) -> PageMeta:
    try:
        found = await resolve_content(category, slug)
    except ContentNotFound as exc:
        logger.info("Metadata requested for missing content: %s", exc)
        raise HTTPException(status_code=404, detail=str(exc))
    except ParseFailure as exc:
        logger.error("Metadata unavailable for %s/%s: %s", category, slug, exc)
        raise HTTPException(status_code=500, detail="The article could not be rendered.")

    return build_page_meta(found.document, article_path(category, slug))

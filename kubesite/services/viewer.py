"""Runtime content viewer.

A :class:`Navigator` owns one parsed app-shell document.  Each call to
:meth:`Navigator.navigate` takes a fresh navigation token; when the content
arrives, it is applied only if no newer navigation has started in the
meantime.  A slow response for a page the visitor already left is dropped
instead of overwriting the head tags of the page they are on now.
"""

import logging
import re
from typing import Optional, Sequence

from bs4 import BeautifulSoup

from kubesite import config
from kubesite.models.view import ViewState
from kubesite.services.errors import ContentNotFound, ParseFailure
from kubesite.services.head import RUNTIME_SCHEMAS, sync_error_head, sync_head
from kubesite.services.normalizer import article_path, canonical_url_for, get_canonical_url
from kubesite.services.pages import mount_fragment, render_app_shell, render_view
from kubesite.services.seo import build_page_meta
from kubesite.services.sources import DEFAULT_SOURCES, MarkdownSource, PrerenderedHtmlSource, resolve_content

logger = logging.getLogger(__name__)

_ROUTE_RE = re.compile(r"^/(?P<category>[^/]+)/(?P<slug>[^/]+)/?$")


def parse_route(location: str) -> tuple[str, str]:
    """Split ``/<category>/<slug>`` into its parts.

    Raises:
        ContentNotFound: for paths that are not article routes.
    """
    path = location.split("?", 1)[0].split("#", 1)[0]
    match = _ROUTE_RE.match(path)
    if not match or match.group("category") not in config.CATEGORIES:
        raise ContentNotFound("", path.strip("/"), [path])
    return match.group("category"), match.group("slug")


def not_found_message(exc: ContentNotFound) -> str:
    if exc.category:
        return (
            f"We couldn't find “{exc.slug}”. Looked for a pre-rendered page at "
            f"{PrerenderedHtmlSource().location(exc.category, exc.slug)} and for the "
            f"markdown source at {MarkdownSource().location(exc.category, exc.slug)}."
        )
    return f"There is no article at {', '.join(exc.locations)}."


def error_title(state: ViewState) -> str:
    heading = "Content not found" if state.error_kind == "not_found" else "Article unavailable"
    return f"{heading} | {config.SITE_NAME}"


class Navigator:
    """Apply navigations to a single app-shell document, last one wins."""

    def __init__(
        self,
        document: Optional[BeautifulSoup] = None,
        sources: Sequence = DEFAULT_SOURCES,
        origin: Optional[str] = None,
    ):
        self.document = document if document is not None else BeautifulSoup(render_app_shell(), "lxml")
        self.sources = sources
        self.origin = origin
        self.state: Optional[ViewState] = None
        self._token = 0

    def is_current(self, token: int) -> bool:
        return token == self._token

    def _show(self, state: ViewState) -> None:
        self.state = state
        mount_fragment(self.document, render_view(state))

    async def navigate(self, location: str) -> Optional[ViewState]:
        """Load the article at *location* into the document.

        Returns:
            The terminal :class:`ViewState`, or *None* when a newer navigation
            superseded this one before its content arrived.
        """
        self._token += 1
        token = self._token

        try:
            category, slug = parse_route(location)
        except ContentNotFound as exc:
            state = ViewState(
                status="error",
                category="",
                slug=exc.slug,
                error_kind="not_found",
                error_message=not_found_message(exc),
            )
            self._apply(state, get_canonical_url(location))
            return state

        self._show(ViewState(status="loading", category=category, slug=slug))

        try:
            found = await resolve_content(category, slug, self.sources, self.origin)
        except ContentNotFound as exc:
            state = ViewState(
                status="error",
                category=category,
                slug=slug,
                error_kind="not_found",
                error_message=not_found_message(exc),
            )
        except ParseFailure as exc:
            logger.error("Could not render %s/%s: %s", category, slug, exc)
            state = ViewState(
                status="error",
                category=category,
                slug=slug,
                error_kind="parse_failure",
                error_message="This article could not be rendered. Please try again later.",
            )
        else:
            # The article route, not the raw location, so "/learn/pods/" and
            # "/learn/pods" share the canonical URL the pre-renderer writes
            meta = build_page_meta(found.document, article_path(category, slug))
            state = ViewState(
                status="rendered",
                category=category,
                slug=slug,
                document=found.document,
                meta=meta,
                source=found.location,
            )

        if not self.is_current(token):
            logger.debug("Discarding superseded navigation to %s", location)
            return None

        self._apply(state, canonical_url_for(category, slug))
        return state

    def _apply(self, state: ViewState, canonical_url: str) -> None:
        if state.meta is not None:
            sync_head(self.document, state.meta, schemas=RUNTIME_SCHEMAS)
        else:
            sync_error_head(self.document, canonical_url, error_title(state))
        self._show(state)

    def html(self) -> str:
        return str(self.document)

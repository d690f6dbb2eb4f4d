"""Ordered content-source strategies for the runtime viewer.

Resolution order:
1. Pre-rendered snapshot at ``/<category>/<slug>/index.html``
2. Markdown source at ``/content/<category>/<slug>.md``

Each source reports a typed outcome instead of raising, and
:func:`resolve_content` walks the list until one of them finds the article.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import httpx

from kubesite.models.document import ContentDocument
from kubesite.services.detector import has_article, is_app_shell
from kubesite.services.documents import build_document, document_from_prerendered
from kubesite.services.errors import ContentFetchError, ContentNotFound, ParseFailure
from kubesite.services.fetcher import content_url, fetch_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    document: ContentDocument
    location: str


@dataclass(frozen=True)
class NotApplicable:
    location: str
    reason: str


@dataclass(frozen=True)
class Failed:
    location: str
    reason: str
    parse_error: bool = False


Outcome = Union[Found, NotApplicable, Failed]


async def _fetch(location: str, origin: Optional[str]) -> Union[str, NotApplicable, Failed]:
    """Fetch *location*, mapping transport problems onto outcomes."""
    try:
        return await fetch_url(content_url(location, origin))
    except httpx.HTTPStatusError as exc:
        return NotApplicable(location, f"HTTP {exc.response.status_code}")
    except (ValueError, httpx.HTTPError, ContentFetchError) as exc:
        logger.warning("Content source: fetching %s failed – %s", location, exc)
        return Failed(location, str(exc))


class PrerenderedHtmlSource:
    name = "prerendered"

    def location(self, category: str, slug: str) -> str:
        return f"/{category}/{slug}/index.html"

    async def load(self, category: str, slug: str, origin: Optional[str] = None) -> Outcome:
        location = self.location(category, slug)
        body = await _fetch(location, origin)
        if not isinstance(body, str):
            return body

        if is_app_shell(body):
            return NotApplicable(location, "app shell served instead of a snapshot")
        if not has_article(body):
            return NotApplicable(location, "no article body")

        try:
            document = document_from_prerendered(category, slug, body)
        except ParseFailure as exc:
            return Failed(location, str(exc), parse_error=True)
        return Found(document, location)


class MarkdownSource:
    name = "markdown"

    def location(self, category: str, slug: str) -> str:
        return f"/content/{category}/{slug}.md"

    async def load(self, category: str, slug: str, origin: Optional[str] = None) -> Outcome:
        location = self.location(category, slug)
        body = await _fetch(location, origin)
        if not isinstance(body, str):
            return body

        try:
            document = build_document(category, slug, body)
        except ParseFailure as exc:
            return Failed(location, str(exc), parse_error=True)
        return Found(document, location)


DEFAULT_SOURCES = (PrerenderedHtmlSource(), MarkdownSource())


async def resolve_content(
    category: str,
    slug: str,
    sources: Sequence = DEFAULT_SOURCES,
    origin: Optional[str] = None,
) -> Found:
    """Return the first source that finds *category*/*slug*.

    Raises:
        ParseFailure: if a source found the content but could not render it.
        ContentNotFound: if no source has the content.
    """
    outcomes: List[Outcome] = []
    for source in sources:
        outcome = await source.load(category, slug, origin)
        if isinstance(outcome, Found):
            logger.info("Content source: %s served %s/%s", source.name, category, slug)
            return outcome
        logger.info(
            "Content source: %s skipped %s/%s – %s",
            source.name,
            category,
            slug,
            outcome.reason,
        )
        outcomes.append(outcome)

    parse_failures = [o for o in outcomes if isinstance(o, Failed) and o.parse_error]
    if parse_failures:
        raise ParseFailure(parse_failures[0].reason)

    raise ContentNotFound(category, slug, [o.location for o in outcomes])

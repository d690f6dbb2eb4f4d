"""Document ``<head>`` reconciliation.

Every operation here is set-or-create, keyed by tag identity (``rel=canonical``,
``property=og:*``, ``name=twitter:*``, ``data-schema=*``), so applying the same
:class:`PageMeta` twice leaves the head exactly as applying it once.

The same code patches the runtime app shell on navigation and finishes the
static pages written by the pre-renderer.
"""

import json
import logging
import re
from typing import Callable, Iterable, Tuple

from bs4 import BeautifulSoup, Tag

from kubesite.models.page_meta import PageMeta
from kubesite.services.normalizer import normalize_canonical_url
from kubesite.services.seo import og_tags, twitter_tags

logger = logging.getLogger(__name__)

RUNTIME_SCHEMAS: Tuple[str, ...] = ("article", "breadcrumb")
STATIC_SCHEMAS: Tuple[str, ...] = ("article", "webpage", "breadcrumb")

SCHEMA_ATTR = "data-schema"


def _head(soup: BeautifulSoup) -> Tag:
    head = soup.find("head")
    if head is None:
        head = soup.new_tag("head")
        html = soup.find("html")
        if html is not None:
            html.insert(0, head)
        else:
            soup.insert(0, head)
    return head


def set_canonical(soup: BeautifulSoup, url: str) -> None:
    href = normalize_canonical_url(url)
    head = _head(soup)
    links = head.find_all("link", rel="canonical")
    if not links:
        head.append(soup.new_tag("link", rel="canonical", href=href))
        return
    links[0]["href"] = href
    for extra in links[1:]:
        extra.decompose()


def set_meta(soup: BeautifulSoup, key_attr: str, key: str, content: str) -> None:
    head = _head(soup)
    tags = head.find_all("meta", attrs={key_attr: key})
    if not tags:
        head.append(soup.new_tag("meta", attrs={key_attr: key, "content": content}))
        return
    tags[0]["content"] = content
    for extra in tags[1:]:
        extra.decompose()


def replace_schema(soup: BeautifulSoup, marker: str, data: dict) -> None:
    head = _head(soup)
    script = soup.new_tag("script", attrs={"type": "application/ld+json", SCHEMA_ATTR: marker})
    # "</" would close the script element early
    script.string = json.dumps(data, ensure_ascii=False, indent=2).replace("</", "<\\/")

    existing = head.find_all("script", attrs={SCHEMA_ATTR: marker})
    if not existing:
        head.append(script)
        return
    existing[0].replace_with(script)
    for extra in existing[1:]:
        extra.decompose()


def set_title(soup: BeautifulSoup, title: str) -> None:
    head = _head(soup)
    tag = head.find("title")
    if tag is None:
        tag = soup.new_tag("title")
        head.insert(0, tag)
    tag.string = title


def _run(operations: Iterable[Tuple[str, Callable[[], None]]]) -> int:
    failures = 0
    for name, operation in operations:
        try:
            operation()
        except Exception:
            failures += 1
            logger.exception("Head update failed: %s", name)
    return failures


def sync_head(
    soup: BeautifulSoup,
    meta: PageMeta,
    schemas: Iterable[str] = RUNTIME_SCHEMAS,
) -> int:
    """Reconcile every head tag in *soup* with *meta*.

    Failures are logged per tag and never propagate, so a broken head cannot
    stop the article body from rendering.

    Returns:
        The number of operations that failed.
    """
    operations = [
        ("title", lambda: set_title(soup, meta.document_title)),
        ("description", lambda: set_meta(soup, "name", "description", meta.meta_description)),
        ("canonical", lambda: set_canonical(soup, meta.canonical_url)),
        (
            "article:published_time",
            lambda: set_meta(soup, "property", "article:published_time", meta.published),
        ),
    ]
    operations += [
        (key, lambda key=key, value=value: set_meta(soup, "property", key, value))
        for key, value in og_tags(meta)
    ]
    operations += [
        (key, lambda key=key, value=value: set_meta(soup, "name", key, value))
        for key, value in twitter_tags(meta)
    ]
    operations += [
        (
            f"schema:{marker}",
            lambda marker=marker: replace_schema(soup, marker, meta.schemas[marker]),
        )
        for marker in schemas
    ]

    failures = _run(operations)
    if failures:
        logger.warning("Head sync finished with %d failed operation(s)", failures, extra={"url": meta.canonical_url})
    return failures


def clear_article_tags(soup: BeautifulSoup) -> None:
    """Remove the description, OG, Twitter, article and JSON-LD tags."""
    head = _head(soup)
    stale = head.find_all("script", attrs={SCHEMA_ATTR: True})
    stale += head.find_all("meta", attrs={"name": "description"})
    stale += head.find_all("meta", attrs={"name": re.compile(r"^twitter:")})
    stale += head.find_all("meta", attrs={"property": re.compile(r"^(og|article):")})
    for tag in stale:
        tag.decompose()


def sync_error_head(soup: BeautifulSoup, canonical_url: str, title: str) -> int:
    """Point the head at an error page: canonical and title only.

    Tags describing a previously shown article are removed.  Like
    :func:`sync_head`, failures are logged and counted, never raised.
    """
    failures = _run(
        [
            ("title", lambda: set_title(soup, title)),
            ("canonical", lambda: set_canonical(soup, canonical_url)),
            ("article tags", lambda: clear_article_tags(soup)),
        ]
    )
    if failures:
        logger.warning("Error head sync finished with %d failed operation(s)", failures, extra={"url": canonical_url})
    return failures

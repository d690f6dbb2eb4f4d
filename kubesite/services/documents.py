"""Construction of :class:`ContentDocument` from markdown or pre-rendered pages."""

import datetime as dt
import logging
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from kubesite import config
from kubesite.models.document import ContentDocument
from kubesite.services.errors import ParseFailure
from kubesite.services.frontmatter import parse_frontmatter
from kubesite.services.normalizer import slug_to_title
from kubesite.services.renderer import render_markdown

logger = logging.getLogger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")


def parse_date(raw: Optional[str]) -> str:
    """Return an ISO timestamp for a frontmatter date, or the fixed content date."""
    raw = (raw or "").strip()
    if raw:
        for fmt in _DATE_FORMATS:
            try:
                day = dt.datetime.strptime(raw, fmt).date()
            except ValueError:
                continue
            return f"{day.isoformat()}T00:00:00Z"
        logger.warning("Ignoring unparseable date %r", raw)
    return config.CONTENT_DATE


def build_document(category: str, slug: str, text: str) -> ContentDocument:
    """Parse frontmatter, apply fallbacks and render the body of one article.

    Raises:
        ParseFailure: if the markdown cannot be rendered.
    """
    data, body = parse_frontmatter(text)
    title = data.get("title") or slug_to_title(slug)
    return ContentDocument(
        slug=slug,
        category=category,
        title=title,
        description=data.get("description") or title,
        image=data.get("image") or None,
        published=parse_date(data.get("date")),
        body_markdown=body,
        body_html=render_markdown(body),
    )


def load_document(path: Path, category: str) -> ContentDocument:
    return build_document(category, path.stem, path.read_text(encoding="utf-8"))


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return str(tag["content"]).strip()
    return ""


def document_from_prerendered(category: str, slug: str, html: str) -> ContentDocument:
    """Rebuild a document from a page written by the pre-renderer.

    Raises:
        ParseFailure: if *html* holds no article body.
    """
    soup = BeautifulSoup(html, "lxml")

    article = soup.find("article", class_="markdown-content")
    if article is None:
        raise ParseFailure(f"No article body in pre-rendered page for {category}/{slug}")

    h1 = soup.find("h1")
    title = h1.get_text(strip=True) if h1 else ""
    title = title or slug_to_title(slug)

    # The head copies are truncated; the article carries the full description
    description = (
        str(article.get("data-description") or "").strip()
        or _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or title
    )
    published = _meta_content(soup, property="article:published_time") or config.CONTENT_DATE

    return ContentDocument(
        slug=slug,
        category=category,
        title=title,
        description=description,
        image=article.get("data-image") or None,
        published=published,
        body_html=article.decode_contents().strip(),
    )

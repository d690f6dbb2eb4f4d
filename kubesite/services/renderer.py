"""Markdown to HTML for article bodies.

Article images are never rendered: markdown image syntax produces no output
at all, and ``<img>`` tags written as raw HTML are dropped.  Thumbnails
belong to the page chrome, not to article bodies.
"""

import logging
import re

from markdown_it import MarkdownIt

from kubesite.services.errors import ParseFailure

logger = logging.getLogger(__name__)

_H1_OPEN_RE = re.compile(r"<h1(\s[^>]*)?>", re.IGNORECASE)
_H1_CLOSE_RE = re.compile(r"</h1\s*>", re.IGNORECASE)
_IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)


def _suppress_image(self, tokens, idx, options, env) -> str:
    return ""


def _strip_raw_images(self, tokens, idx, options, env) -> str:
    return _IMG_RE.sub("", tokens[idx].content)


def _make_parser() -> MarkdownIt:
    # gfm-like: tables, strikethrough and linkify autolinks.  No anchor plugin
    # is loaded, so headings carry no generated ids.
    md = MarkdownIt("gfm-like", {"breaks": True, "html": True})
    md.add_render_rule("image", _suppress_image)
    md.add_render_rule("html_block", _strip_raw_images)
    md.add_render_rule("html_inline", _strip_raw_images)
    return md


_MD = _make_parser()


def demote_headings(html: str) -> str:
    """Turn every ``<h1>`` into ``<h2>``; the page template owns the only h1."""
    html = _H1_OPEN_RE.sub(lambda m: f"<h2{m.group(1) or ''}>", html)
    return _H1_CLOSE_RE.sub("</h2>", html)


def render_markdown(markdown: str) -> str:
    """Render an article body to HTML with top-level headings demoted.

    Raises:
        ParseFailure: if the markdown library fails on the input.
    """
    try:
        html = _MD.render(markdown)
    except Exception as exc:
        logger.error("Markdown rendering failed: %s", exc)
        raise ParseFailure(f"Markdown could not be rendered: {exc}") from exc
    return demote_headings(html)

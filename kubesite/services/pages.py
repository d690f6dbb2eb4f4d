"""Jinja2 page templates for static snapshots and the runtime app shell."""

from pathlib import Path

from bs4 import BeautifulSoup, Tag
from jinja2 import Environment, FileSystemLoader, select_autoescape

from kubesite import config
from kubesite.models.document import ContentDocument
from kubesite.models.page_meta import PageMeta
from kubesite.models.view import ViewState
from kubesite.services.head import STATIC_SCHEMAS, sync_head

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(),
    keep_trailing_newline=True,
)


def _article_context(document: ContentDocument, meta: PageMeta) -> dict:
    return {
        "document": document,
        "meta": meta,
        "category_path": config.CATEGORY_PATHS.get(document.category, f"/{document.category}"),
    }


def render_static_page(document: ContentDocument, meta: PageMeta) -> str:
    """Render a complete, script-free article page with every head tag in place."""
    html = env.get_template("article.html").render(**_article_context(document, meta))
    soup = BeautifulSoup(html, "lxml")
    sync_head(soup, meta, schemas=STATIC_SCHEMAS)
    return str(soup)


def render_app_shell() -> str:
    return env.get_template("shell.html").render(site_name=config.SITE_NAME)


def render_view(state: ViewState) -> str:
    """Render the content-area fragment for *state*."""
    if state.status == "loading":
        return env.get_template("_loading.html").render()
    if state.status == "error":
        return env.get_template("_error.html").render(state=state)
    return env.get_template("_article.html").render(**_article_context(state.document, state.meta))


def mount_fragment(soup: BeautifulSoup, fragment: str, element_id: str = "root") -> Tag:
    """Replace the children of ``#element_id`` in *soup* with *fragment*."""
    root = soup.find(id=element_id)
    if root is None:
        body = soup.find("body") or soup
        root = soup.new_tag("div", id=element_id)
        body.append(root)
    root.clear()
    root.append(BeautifulSoup(fragment, "html.parser"))
    return root

"""Build-time pre-renderer.

Walks ``<content_root>/<category>/*.md`` and writes, under ``output_root``:

* ``<category>/<slug>/index.html``   static article snapshot
* ``content/<category>/<slug>.md``   copy of the source for the runtime fallback
* ``content/<category>/index.json``  article listing per category
* ``sitemap.xml``                    one canonical ``<url>`` per article

Output depends only on the input files: two runs over the same content are
byte-identical.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from kubesite import config
from kubesite.models.build_report import BuildReport, BuiltPage
from kubesite.services.documents import load_document
from kubesite.services.errors import ParseFailure
from kubesite.services.pages import render_static_page
from kubesite.services.seo import build_page_meta
from kubesite.services.sitemap import build_sitemap

logger = logging.getLogger(__name__)


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8", newline="\n")


def prerender_file(md_path: Path, category: str, output_root: Path) -> BuiltPage:
    """Render one markdown file and write its snapshot and source copy.

    Raises:
        ParseFailure: if the markdown cannot be rendered.
        OSError: on filesystem errors.
    """
    document = load_document(md_path, category)
    meta = build_page_meta(document)

    out = output_root / category / document.slug / "index.html"
    _write(out, render_static_page(document, meta))
    _write(
        output_root / "content" / category / md_path.name,
        md_path.read_text(encoding="utf-8"),
    )

    return BuiltPage(
        category=category,
        slug=document.slug,
        title=document.title,
        description=document.description,
        published=document.published,
        url=meta.canonical_url,
        output_path=str(out.relative_to(output_root)),
    )


def _write_index(output_root: Path, category: str, pages: List[BuiltPage]) -> None:
    listing = [
        {
            "slug": p.slug,
            "title": p.title,
            "description": p.description,
            "date": p.published[:10],
            "url": p.url,
        }
        for p in pages
    ]
    _write(
        output_root / "content" / category / "index.json",
        json.dumps(listing, ensure_ascii=False, indent=2) + "\n",
    )


def prerender_site(
    content_root: Optional[Path] = None,
    output_root: Optional[Path] = None,
    categories: Iterable[str] = tuple(config.CATEGORIES),
) -> BuildReport:
    """Pre-render every article under *content_root* into *output_root*.

    A missing category directory or a file that fails to render is logged and
    skipped; the rest of the build carries on.
    """
    content_root = Path(content_root or config.CONTENT_ROOT)
    output_root = Path(output_root or config.OUTPUT_ROOT)
    output_root.mkdir(parents=True, exist_ok=True)

    pages: List[BuiltPage] = []
    skipped: List[str] = []
    failed: List[str] = []

    for category in categories:
        source_dir = content_root / category
        if not source_dir.is_dir():
            logger.warning("Content directory not found, skipping: %s", source_dir)
            skipped.append(category)
            continue

        category_pages: List[BuiltPage] = []
        for md_path in sorted(source_dir.glob("*.md")):
            try:
                page = prerender_file(md_path, category, output_root)
            except (ParseFailure, OSError, UnicodeDecodeError) as exc:
                logger.error("Failed to pre-render %s: %s", md_path, exc)
                failed.append(str(md_path))
                continue
            logger.info("Pre-rendered /%s/%s", category, page.slug)
            category_pages.append(page)

        _write_index(output_root, category, category_pages)
        pages.extend(category_pages)

    _write(
        output_root / "sitemap.xml",
        build_sitemap((p.url, p.published) for p in pages),
    )
    logger.info(
        "Pre-rendering complete",
        extra={"pages": len(pages), "skipped": skipped, "failed": len(failed)},
    )
    return BuildReport(pages=pages, skipped_categories=skipped, failed_files=failed)

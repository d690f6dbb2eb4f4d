"""Canonical URL audit over a built site.

Checks that every ``index.html`` carries exactly one canonical link in the
canonical host form and that ``sitemap.xml`` only lists canonical URLs.  With
``fix=True`` offending hrefs (and the matching ``og:url``) are rewritten in
place.  Pages with several canonical links are reported as ``duplicate``;
fixing keeps only the first, normalised.
"""

import logging
from pathlib import Path
from typing import List

from bs4 import BeautifulSoup

from kubesite.models.build_report import AuditEntry, AuditReport
from kubesite.services.head import set_canonical, set_meta
from kubesite.services.normalizer import normalize_canonical_url
from kubesite.services.sitemap import parse_sitemap

logger = logging.getLogger(__name__)


def find_pages(output_root: Path) -> List[Path]:
    return sorted(output_root.rglob("index.html"))


def audit_page(path: Path, output_root: Path, fix: bool = False) -> AuditEntry:
    relative = path.parent.relative_to(output_root).as_posix()
    route = "/" if relative == "." else f"/{relative}"

    try:
        soup = BeautifulSoup(path.read_text(encoding="utf-8"), "lxml")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Audit: cannot read %s – %s", path, exc)
        return AuditEntry(path=route, status="error", error=str(exc))

    links = soup.find_all("link", rel="canonical")
    if not links or not links[0].get("href"):
        return AuditEntry(path=route, status="missing")

    url = str(links[0]["href"])
    expected = normalize_canonical_url(url)
    if len(links) == 1 and url == expected:
        return AuditEntry(path=route, status="ok", url=url)

    status = "duplicate" if len(links) > 1 else "non_canonical"
    entry = AuditEntry(path=route, status=status, url=url, expected=expected)
    if fix:
        set_canonical(soup, expected)
        if soup.find("meta", attrs={"property": "og:url"}) is not None:
            set_meta(soup, "property", "og:url", expected)
        path.write_text(str(soup), encoding="utf-8", newline="\n")
        logger.info("Audit: fixed canonical for %s (%s -> %s)", route, url, expected)
        entry = entry.model_copy(update={"fixed": True})
    return entry


def _audit_sitemap(output_root: Path, fix: bool) -> List[str]:
    sitemap = output_root / "sitemap.xml"
    if not sitemap.is_file():
        return []

    xml_text = sitemap.read_text(encoding="utf-8")
    locs = parse_sitemap(xml_text)
    bad = [loc for loc in locs if normalize_canonical_url(loc) != loc]
    if not bad or not fix:
        return bad

    # lastmod values are kept by rewriting the loc text only
    for loc in bad:
        xml_text = xml_text.replace(f"<loc>{loc}</loc>", f"<loc>{normalize_canonical_url(loc)}</loc>")
    sitemap.write_text(xml_text, encoding="utf-8", newline="\n")
    logger.info("Audit: fixed %d sitemap location(s)", len(bad))
    return [loc for loc in parse_sitemap(xml_text) if normalize_canonical_url(loc) != loc]


def audit_site(output_root: Path, fix: bool = False) -> AuditReport:
    output_root = Path(output_root)
    entries = [audit_page(path, output_root, fix=fix) for path in find_pages(output_root)]
    report = AuditReport(entries=entries, sitemap_issues=_audit_sitemap(output_root, fix))
    logger.info(
        "Canonical audit complete",
        extra={"pages": len(entries), "issues": len(report.issues)},
    )
    return report

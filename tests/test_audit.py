"""Tests for kubesite.services.audit."""

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from kubesite.services.audit import audit_site
from kubesite.services.prerender import prerender_site
from kubesite.services.sitemap import parse_sitemap

_BASE = "https://www.managekubernetes.com"


@pytest.fixture
def site(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    (content / "ops").mkdir(parents=True)
    (content / "ops" / "probes.md").write_text("---\ntitle: Probes\n---\nLiveness.", encoding="utf-8")
    (content / "ops" / "monitor-pods.md").write_text("Watch your pods.", encoding="utf-8")
    out = tmp_path / "dist"
    prerender_site(content, out)
    return out


def _edit_page(site: Path, relative: str, edit) -> Path:
    path = site / relative / "index.html"
    soup = BeautifulSoup(path.read_text(encoding="utf-8"), "lxml")
    edit(soup)
    path.write_text(str(soup), encoding="utf-8")
    return path


def _point_canonical_at_apex(soup: BeautifulSoup) -> None:
    soup.find("link", rel="canonical")["href"] = "https://managekubernetes.com/ops/probes?utm=x"
    soup.find("meta", attrs={"property": "og:url"})["content"] = "https://managekubernetes.com/ops/probes"


# ---------------------------------------------------------------------------
# Page checks
# ---------------------------------------------------------------------------

class TestAuditPages:
    def test_fresh_build_is_clean(self, site):
        report = audit_site(site)
        assert report.ok
        assert [e.path for e in report.entries] == ["/ops/monitor-pods", "/ops/probes"]
        assert all(e.status == "ok" for e in report.entries)

    def test_non_canonical_reported(self, site):
        _edit_page(site, "ops/probes", _point_canonical_at_apex)
        report = audit_site(site)

        assert not report.ok
        (entry,) = report.issues
        assert entry.path == "/ops/probes"
        assert entry.status == "non_canonical"
        assert entry.expected == f"{_BASE}/ops/probes"
        assert entry.fixed is False

    def test_fix_rewrites_canonical_and_og_url(self, site):
        path = _edit_page(site, "ops/probes", _point_canonical_at_apex)
        report = audit_site(site, fix=True)
        assert report.ok
        assert any(e.fixed for e in report.entries)

        soup = BeautifulSoup(path.read_text(encoding="utf-8"), "lxml")
        assert soup.find("link", rel="canonical")["href"] == f"{_BASE}/ops/probes"
        assert soup.find("meta", attrs={"property": "og:url"})["content"] == f"{_BASE}/ops/probes"
        assert audit_site(site).ok

    def test_duplicate_canonical_reported_and_fixed(self, site):
        def add_second_canonical(soup):
            extra = soup.new_tag("link", rel="canonical", href="https://www.managekubernetes.com/ops/other")
            soup.head.append(extra)

        path = _edit_page(site, "ops/probes", add_second_canonical)
        report = audit_site(site)
        (entry,) = report.issues
        assert entry.status == "duplicate"
        assert entry.url == f"{_BASE}/ops/probes"

        assert audit_site(site, fix=True).ok
        soup = BeautifulSoup(path.read_text(encoding="utf-8"), "lxml")
        links = soup.find_all("link", rel="canonical")
        assert [link["href"] for link in links] == [f"{_BASE}/ops/probes"]
        assert audit_site(site).ok

    def test_missing_canonical(self, site):
        _edit_page(site, "ops/probes", lambda soup: soup.find("link", rel="canonical").decompose())
        report = audit_site(site, fix=True)
        statuses = {e.path: e.status for e in report.entries}
        assert statuses["/ops/probes"] == "missing"
        assert not report.ok


# ---------------------------------------------------------------------------
# Sitemap checks
# ---------------------------------------------------------------------------

class TestAuditSitemap:
    def _apex_sitemap(self, site: Path) -> Path:
        sitemap = site / "sitemap.xml"
        text = sitemap.read_text(encoding="utf-8").replace(_BASE, "https://managekubernetes.com")
        sitemap.write_text(text, encoding="utf-8")
        return sitemap

    def test_non_canonical_locs_reported(self, site):
        self._apex_sitemap(site)
        report = audit_site(site)
        assert report.sitemap_issues == [
            "https://managekubernetes.com/ops/monitor-pods",
            "https://managekubernetes.com/ops/probes",
        ]
        assert not report.ok

    def test_fix_rewrites_locs(self, site):
        sitemap = self._apex_sitemap(site)
        report = audit_site(site, fix=True)
        assert report.sitemap_issues == []
        text = sitemap.read_text(encoding="utf-8")
        assert parse_sitemap(text) == [f"{_BASE}/ops/monitor-pods", f"{_BASE}/ops/probes"]
        assert "<lastmod>2024-11-06</lastmod>" in text

    def test_no_sitemap(self, tmp_path):
        report = audit_site(tmp_path)
        assert report.entries == []
        assert report.ok

"""Tests for kubesite.services.prerender."""

import json
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from kubesite.services.documents import document_from_prerendered, load_document
from kubesite.services.prerender import prerender_site
from kubesite.services.seo import build_page_meta
from kubesite.services.sitemap import parse_sitemap

_BASE = "https://www.managekubernetes.com"

_EVICTED = (
    "---\n"
    'title: "Troubleshooting Kubernetes Pods in Evicted State"\n'
    'description: "Why the kubelet evicts pods and how to keep critical workloads running."\n'
    "date: 2025-02-03\n"
    "---\n"
    "# Evicted pods\n\n"
    "![Eviction flow](/images/eviction.png)\n\n"
    "| Signal | Threshold |\n|---|---|\n| memory.available | 100Mi |\n"
)

_CORE = "---\ntitle: Core Components\n---\nThe control plane runs the API server.\n"


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    (root / "blog").mkdir(parents=True)
    (root / "learn").mkdir()
    (root / "blog" / "troubleshooting-pods-evicted.md").write_text(_EVICTED, encoding="utf-8")
    (root / "learn" / "core-components.md").write_text(_CORE, encoding="utf-8")
    (root / "learn" / "notes.txt").write_text("not an article", encoding="utf-8")
    return root


def _page(output_root: Path, category: str, slug: str) -> BeautifulSoup:
    html = (output_root / category / slug / "index.html").read_text(encoding="utf-8")
    return BeautifulSoup(html, "lxml")


# ---------------------------------------------------------------------------
# Site build
# ---------------------------------------------------------------------------

class TestPrerenderSite:
    def test_pages_written_per_category(self, content_root, tmp_path):
        out = tmp_path / "dist"
        report = prerender_site(content_root, out)

        assert [(p.category, p.slug) for p in report.pages] == [
            ("blog", "troubleshooting-pods-evicted"),
            ("learn", "core-components"),
        ]
        assert (out / "blog" / "troubleshooting-pods-evicted" / "index.html").is_file()
        assert (out / "learn" / "core-components" / "index.html").is_file()
        assert report.failed_files == []

    def test_missing_category_skipped(self, content_root, tmp_path):
        report = prerender_site(content_root, tmp_path / "dist")
        assert report.skipped_categories == ["ops"]

    def test_missing_content_root(self, tmp_path):
        report = prerender_site(tmp_path / "absent", tmp_path / "dist")
        assert report.pages == []
        assert report.skipped_categories == ["blog", "learn", "ops"]

    def test_unreadable_file_recorded_and_build_continues(self, content_root, tmp_path):
        (content_root / "blog" / "broken.md").write_bytes(b"\xff\xfe\x00broken")
        report = prerender_site(content_root, tmp_path / "dist")
        assert len(report.failed_files) == 1
        assert report.failed_files[0].endswith("broken.md")
        assert len(report.pages) == 2

    def test_output_is_reproducible(self, content_root, tmp_path):
        first, second = tmp_path / "one", tmp_path / "two"
        prerender_site(content_root, first)
        prerender_site(content_root, second)

        files = sorted(p.relative_to(first) for p in first.rglob("*") if p.is_file())
        assert files
        for relative in files:
            assert (first / relative).read_bytes() == (second / relative).read_bytes()


# ---------------------------------------------------------------------------
# Page contents
# ---------------------------------------------------------------------------

class TestStaticPage:
    def test_single_h1_and_no_images(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        soup = _page(out, "blog", "troubleshooting-pods-evicted")

        assert [h.get_text() for h in soup.find_all("h1")] == [
            "Troubleshooting Kubernetes Pods in Evicted State"
        ]
        assert soup.find("h2").get_text() == "Evicted pods"
        assert soup.find("img") is None
        assert soup.find("table") is not None

    def test_head_tags(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        soup = _page(out, "blog", "troubleshooting-pods-evicted")
        canonical = f"{_BASE}/blog/troubleshooting-pods-evicted"

        links = soup.find_all("link", rel="canonical")
        assert len(links) == 1
        assert links[0]["href"] == canonical
        assert soup.find("meta", attrs={"property": "og:url"})["content"] == canonical
        assert soup.find("meta", attrs={"property": "og:image"})["content"] == (
            f"{_BASE}/images/hero.svg"
        )
        assert soup.find("meta", attrs={"property": "article:published_time"})["content"] == (
            "2025-02-03T00:00:00Z"
        )

        schemas = [
            json.loads(s.string) for s in soup.find_all("script", type="application/ld+json")
        ]
        assert [s["@type"] for s in schemas] == ["Article", "WebPage", "BreadcrumbList"]
        assert soup.find("script", src=True) is None

    def test_runtime_metadata_matches_build(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        md_path = content_root / "blog" / "troubleshooting-pods-evicted.md"
        html = (out / "blog" / "troubleshooting-pods-evicted" / "index.html").read_text(encoding="utf-8")

        built = build_page_meta(load_document(md_path, "blog"))
        runtime = build_page_meta(
            document_from_prerendered("blog", "troubleshooting-pods-evicted", html)
        )
        assert runtime == built


# ---------------------------------------------------------------------------
# Side outputs
# ---------------------------------------------------------------------------

class TestSideOutputs:
    def test_markdown_copied_for_runtime_fallback(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        copy = out / "content" / "learn" / "core-components.md"
        assert copy.read_text(encoding="utf-8") == _CORE

    def test_category_index(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        listing = json.loads((out / "content" / "learn" / "index.json").read_text(encoding="utf-8"))
        assert listing == [
            {
                "slug": "core-components",
                "title": "Core Components",
                "description": "Core Components",
                "date": "2024-11-06",
                "url": f"{_BASE}/learn/core-components",
            }
        ]

    def test_sitemap_lists_canonical_urls(self, content_root, tmp_path):
        out = tmp_path / "dist"
        prerender_site(content_root, out)
        locs = parse_sitemap((out / "sitemap.xml").read_text(encoding="utf-8"))
        assert locs == [
            f"{_BASE}/blog/troubleshooting-pods-evicted",
            f"{_BASE}/learn/core-components",
        ]

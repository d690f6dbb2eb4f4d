"""Shared fixtures: a fake content origin for the runtime fetch chain."""

from typing import Dict
from unittest.mock import AsyncMock, patch

import httpx
import pytest

ORIGIN = "http://127.0.0.1:8000"


def not_found(url: str) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(404, request=request)
    return httpx.HTTPStatusError("404 Not Found", request=request, response=response)


def fake_origin(pages: Dict[str, str]) -> AsyncMock:
    """An AsyncMock for ``fetch_url`` serving *pages* keyed by path; anything else 404s."""

    async def _fetch(url: str) -> str:
        path = url[len(ORIGIN):] if url.startswith(ORIGIN) else url
        if path in pages:
            return pages[path]
        raise not_found(url)

    return AsyncMock(side_effect=_fetch)


@pytest.fixture
def origin():
    """Patch the source fetcher; tests fill the returned dict with path -> body."""
    pages: Dict[str, str] = {}
    mock = fake_origin(pages)
    with patch("kubesite.services.sources.fetch_url", new=mock):
        yield pages

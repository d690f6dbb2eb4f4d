from urllib.parse import urljoin, urlparse

import httpx

from kubesite import config
from kubesite.services.errors import ContentFetchError

MAX_CONTENT_SIZE = 5 * 1024 * 1024  # 5 MB
TIMEOUT = 10  # seconds
MAX_REDIRECTS = 5
ALLOWED_SCHEMES = {"http", "https"}


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not an absolute http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")


def content_url(path: str, origin: str | None = None) -> str:
    """Join a site path such as ``/blog/x/index.html`` onto the content origin."""
    return urljoin((origin or config.CONTENT_ORIGIN).rstrip("/") + "/", path.lstrip("/"))


async def _read_capped(response: httpx.Response) -> bytes:
    content_length = response.headers.get("content-length")
    if content_length and int(content_length) > MAX_CONTENT_SIZE:
        raise ContentFetchError("Response body exceeds the maximum allowed size.")

    chunks = []
    total = 0
    async for chunk in response.aiter_bytes():
        total += len(chunk)
        if total > MAX_CONTENT_SIZE:
            raise ContentFetchError("Response body exceeds the maximum allowed size.")
        chunks.append(chunk)
    return b"".join(chunks)


async def fetch_url(url: str) -> str:
    """Fetch a page or markdown file from the content origin.

    Redirects are followed (at most MAX_REDIRECTS) and the body is streamed
    so that an oversized response is abandoned as soon as it passes the cap.

    Raises:
        ValueError: if the URL is not an absolute http(s) URL.
        httpx.HTTPError: on network errors, too many redirects or a
            non-success status.
        ContentFetchError: if the response body exceeds MAX_CONTENT_SIZE.
    """
    _validate_url(url)

    async with httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        timeout=TIMEOUT,
    ) as client:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            body = await _read_capped(response)

    return body.decode(errors="replace")

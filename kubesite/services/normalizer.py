"""Canonical URL rules shared by the pre-renderer and the runtime viewer.

The canonical host form is decided here and nowhere else: every URL the site
publishes goes through :func:`normalize_canonical_url` or is composed from
:data:`CANONICAL_BASE`.
"""

import logging
import re
from urllib.parse import urljoin, urlsplit

from kubesite import config

logger = logging.getLogger(__name__)

_WWW_PREFIX = "www."

# Used only when urlsplit cannot make sense of the input
_SCHEME_HOST_RE = re.compile(r"^(https?://)(?:www\.)?", re.IGNORECASE)


def _normalize_heuristic(url: str) -> str:
    """Best-effort string rewrite for URLs that do not parse."""
    stripped = url.split("#", 1)[0].split("?", 1)[0]
    return _SCHEME_HOST_RE.sub(lambda m: m.group(1) + _WWW_PREFIX, stripped, count=1)


def normalize_canonical_url(url: str) -> str:
    """Return *url* in canonical form: ``www.`` host, no query, no fragment.

    Scheme, port and path are preserved.  Malformed input never raises; it is
    rewritten with a string heuristic instead.
    """
    if not url:
        return url

    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
        if not parts.scheme or not host:
            raise ValueError(f"not an absolute URL: {url!r}")
    except ValueError as exc:
        logger.debug("Falling back to heuristic normalisation: %s", exc)
        return _normalize_heuristic(url)

    if not host.startswith(_WWW_PREFIX):
        host = _WWW_PREFIX + host
    netloc = host if port is None else f"{host}:{port}"
    return f"{parts.scheme}://{netloc}{parts.path}"


CANONICAL_BASE = normalize_canonical_url(config.SITE_URL).rstrip("/")


def get_canonical_url(location: str = "/") -> str:
    """Return the canonical URL for the page currently at *location*.

    *location* may be a path or a full URL.  Only its path is used: the host
    the page was actually served from is ignored.
    """
    try:
        path = urlsplit(location or "/").path
    except ValueError:
        path = _normalize_heuristic(location).split("://", 1)[-1]
        path = path[path.find("/") :] if "/" in path else "/"
    if not path.startswith("/"):
        path = "/" + path
    return f"{CANONICAL_BASE}{path}"


def article_path(category: str, slug: str) -> str:
    return f"/{category}/{slug}"


def canonical_url_for(category: str, slug: str) -> str:
    return get_canonical_url(article_path(category, slug))


def resolve_asset_url(path: str) -> str:
    """Make *path* absolute against the canonical base.

    Absolute http(s) URLs are returned untouched so CDN-hosted images keep
    their own host.
    """
    if re.match(r"^https?://", path, re.IGNORECASE):
        return path
    return urljoin(CANONICAL_BASE + "/", path)


def slug_to_title(slug: str) -> str:
    """``getting-started-with-kubernetes`` -> ``Getting Started With Kubernetes``."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)

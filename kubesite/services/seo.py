"""Page metadata and JSON-LD structured data.

Both the pre-renderer and the runtime viewer build their head tags from
:func:`build_page_meta`, so a static snapshot and a client-side navigation to
the same article always advertise the same canonical URL, image and schemas.
"""

from typing import Any, Dict, List, Optional, Tuple

from kubesite import config
from kubesite.models.document import ContentDocument
from kubesite.models.page_meta import PageMeta
from kubesite.services.normalizer import (
    CANONICAL_BASE,
    article_path,
    get_canonical_url,
    resolve_asset_url,
)

ELLIPSIS = "..."
SCHEMA_CONTEXT = "https://schema.org"
LANGUAGE = "en-US"
OG_LOCALE = "en_US"


def truncate(text: str, limit: int) -> str:
    """Collapse whitespace and cut *text* at a word boundary to fit *limit*.

    The ellipsis counts towards the limit.
    """
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    cut = text[: max(limit - len(ELLIPSIS), 0)]
    space = cut.rfind(" ")
    if space > 0:
        cut = cut[:space]
    return cut.rstrip(" ,;:-") + ELLIPSIS


def category_name(category: str) -> str:
    return config.CATEGORIES.get(category, category.title())


def category_url(category: str) -> str:
    return CANONICAL_BASE + config.CATEGORY_PATHS.get(category, f"/{category}")


def image_url_for(document: ContentDocument) -> str:
    return resolve_asset_url(document.image or config.DEFAULT_IMAGE)


def _organization() -> Dict[str, Any]:
    return {"@type": "Organization", "name": config.SITE_NAME}


def _publisher() -> Dict[str, Any]:
    return {
        "@type": "Organization",
        "name": config.SITE_NAME,
        "logo": {
            "@type": "ImageObject",
            "url": resolve_asset_url(config.LOGO_IMAGE),
            "width": config.IMAGE_WIDTH,
            "height": config.IMAGE_HEIGHT,
        },
    }


def article_schema(document: ContentDocument, canonical: str, description: str) -> Dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Article",
        "headline": document.title,
        "description": description,
        "url": canonical,
        "image": image_url_for(document),
        "datePublished": document.published,
        "dateModified": document.published,
        "author": _organization(),
        "publisher": _publisher(),
        "mainEntityOfPage": {"@type": "WebPage", "@id": canonical},
        "inLanguage": LANGUAGE,
        "isAccessibleForFree": True,
        "articleSection": category_name(document.category),
    }


def webpage_schema(document: ContentDocument, canonical: str, description: str) -> Dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebPage",
        "name": document.title,
        "description": description,
        "url": canonical,
        "datePublished": document.published,
        "dateModified": document.published,
        "author": _organization(),
        "publisher": _publisher(),
        "inLanguage": LANGUAGE,
        "isPartOf": {"@type": "WebSite", "name": config.SITE_NAME, "url": CANONICAL_BASE},
    }


def breadcrumb_schema(document: ContentDocument, canonical: str) -> Dict[str, Any]:
    crumbs = [
        ("Home", CANONICAL_BASE),
        (category_name(document.category), category_url(document.category)),
        (document.title, canonical),
    ]
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "item": item}
            for position, (name, item) in enumerate(crumbs, start=1)
        ],
    }


def build_page_meta(document: ContentDocument, location: Optional[str] = None) -> PageMeta:
    """Derive the full head metadata for *document*.

    *location* is the path the page is being viewed at; it defaults to the
    article's own route, which is what the pre-renderer uses.
    """
    canonical = get_canonical_url(location or article_path(document.category, document.slug))
    short_title = truncate(document.title, config.TITLE_LIMIT)
    meta_description = truncate(document.description, config.META_DESCRIPTION_LIMIT)

    return PageMeta(
        title=document.title,
        short_title=short_title,
        document_title=f"{short_title} | {config.SITE_NAME}",
        description=document.description,
        meta_description=meta_description,
        og_description=truncate(document.description, config.OG_DESCRIPTION_LIMIT),
        canonical_url=canonical,
        image_url=image_url_for(document),
        image_width=config.IMAGE_WIDTH,
        image_height=config.IMAGE_HEIGHT,
        site_name=config.SITE_NAME,
        category=document.category,
        category_name=category_name(document.category),
        category_url=category_url(document.category),
        published=document.published,
        schemas={
            "article": article_schema(document, canonical, meta_description),
            "webpage": webpage_schema(document, canonical, meta_description),
            "breadcrumb": breadcrumb_schema(document, canonical),
        },
    )


def og_tags(meta: PageMeta) -> List[Tuple[str, str]]:
    return [
        ("og:title", meta.short_title),
        ("og:description", meta.og_description),
        ("og:url", meta.canonical_url),
        ("og:type", "article"),
        ("og:image", meta.image_url),
        ("og:image:width", str(meta.image_width)),
        ("og:image:height", str(meta.image_height)),
        ("og:image:alt", meta.short_title),
        ("og:site_name", meta.site_name),
        ("og:locale", OG_LOCALE),
    ]


def twitter_tags(meta: PageMeta) -> List[Tuple[str, str]]:
    return [
        ("twitter:card", "summary_large_image"),
        ("twitter:title", meta.short_title),
        ("twitter:description", meta.og_description),
        ("twitter:url", meta.canonical_url),
        ("twitter:image", meta.image_url),
        ("twitter:image:alt", meta.short_title),
    ]

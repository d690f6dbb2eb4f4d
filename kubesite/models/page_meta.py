from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class PageMeta(BaseModel):
    """Everything the document head needs for one article page."""

    model_config = ConfigDict(frozen=True)

    title: str
    short_title: str
    document_title: str
    description: str
    meta_description: str
    og_description: str
    canonical_url: str
    image_url: str
    image_width: int
    image_height: int
    site_name: str
    category: str
    category_name: str
    category_url: str
    published: str
    schemas: Dict[str, Dict[str, Any]]
    """JSON-LD objects keyed by their ``data-schema`` marker."""

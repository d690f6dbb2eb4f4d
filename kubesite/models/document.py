from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Category = Literal["learn", "ops", "blog"]


class ContentDocument(BaseModel):
    """One parsed article, built fresh for every render and never mutated."""

    model_config = ConfigDict(frozen=True)

    slug: str
    category: Category
    title: str
    description: str
    image: Optional[str] = None
    published: str  # ISO-8601 timestamp
    body_markdown: str = ""
    body_html: str

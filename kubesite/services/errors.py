"""Error taxonomy shared by the build and runtime paths."""

from typing import Sequence


class ContentNotFound(LookupError):
    """Neither the pre-rendered page nor the markdown source exists."""

    def __init__(self, category: str, slug: str, locations: Sequence[str] = ()):
        self.category = category
        self.slug = slug
        self.locations = list(locations)
        tried = ", ".join(self.locations) or "no known location"
        super().__init__(f"Content not found for {category}/{slug} (tried {tried})")


class ParseFailure(ValueError):
    """Markdown or pre-rendered HTML could not be turned into an article."""


class ContentFetchError(RuntimeError):
    """A content fetch was refused, e.g. because the body exceeded the size cap."""

from typing import Literal, Optional

from pydantic import BaseModel

from kubesite.models.document import ContentDocument
from kubesite.models.page_meta import PageMeta

ViewStatus = Literal["loading", "rendered", "error"]
ErrorKind = Literal["not_found", "parse_failure"]


class ViewState(BaseModel):
    """What the content area shows for the current navigation."""

    status: ViewStatus
    category: str
    slug: str
    document: Optional[ContentDocument] = None
    meta: Optional[PageMeta] = None
    source: Optional[str] = None
    """Location the content was loaded from."""
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

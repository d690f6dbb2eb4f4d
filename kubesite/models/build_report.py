from typing import List, Literal

from pydantic import BaseModel


class BuiltPage(BaseModel):
    category: str
    slug: str
    title: str
    description: str
    published: str
    url: str
    output_path: str


class BuildReport(BaseModel):
    pages: List[BuiltPage]
    skipped_categories: List[str]
    failed_files: List[str]


AuditStatus = Literal["ok", "missing", "non_canonical", "duplicate", "error"]


class AuditEntry(BaseModel):
    path: str
    status: AuditStatus
    url: str | None = None
    expected: str | None = None
    fixed: bool = False
    error: str | None = None


class AuditReport(BaseModel):
    entries: List[AuditEntry]
    sitemap_issues: List[str]

    @property
    def issues(self) -> List[AuditEntry]:
        return [e for e in self.entries if e.status != "ok" and not e.fixed]

    @property
    def ok(self) -> bool:
        return not self.issues and not self.sitemap_issues

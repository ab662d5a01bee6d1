from typing import List, Literal, Optional

from pydantic import BaseModel, model_validator

ApprovalStatus = Literal["pending", "approved", "rejected", "needs_changes"]
PublishStatus = Literal["ok", "failed"]


class PageResult(BaseModel):
    """Outcome of one page's create-or-update call against the CMS."""

    source_key: str
    ok: bool
    remote_page_id: Optional[int] = None
    link: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None


class PageRecord(BaseModel):
    """One web page within a website update job."""

    source_key: str  # stable id: renderer slug or slugified title
    title: str
    target_slug: str = ""  # user-editable destination slug, defaults to source_key
    body_html: Optional[str] = None
    body_markdown: Optional[str] = None

    approval_status: ApprovalStatus = "pending"
    approval_notes: Optional[str] = None

    # filled by the slug lookup
    remote_page_id: Optional[int] = None
    remote_exists: Optional[bool] = None

    # filled after a publish attempt
    publish_status: Optional[PublishStatus] = None
    publish_result: Optional[PageResult] = None

    @model_validator(mode="after")
    def _default_target_slug(self) -> "PageRecord":
        if not self.target_slug:
            self.target_slug = self.source_key
        return self

    @property
    def body(self) -> str:
        """Content sent to the CMS; HTML wins over Markdown."""
        return self.body_html or self.body_markdown or ""


class SlugLookup(BaseModel):
    source_key: str
    target_slug: str
    exists: bool
    remote_page_id: Optional[int] = None


class SlugLookupResponse(BaseModel):
    pages: List[SlugLookup]

from typing import List, Literal, Optional

from pydantic import BaseModel

from sitejob.models.job import JobStatus, RefeedPayload
from sitejob.models.page import PageRecord


class PageDescriptor(BaseModel):
    """Lightweight page preview returned before a job is created."""

    slug: str
    title: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    body_length: int
    word_count: int
    has_html: bool
    has_markdown: bool


class ParseSource(BaseModel):
    kind: Literal["wrapped", "direct", "raw_string"]
    embedded_detected: bool


class ParsePreviewResponse(BaseModel):
    brand: str
    content_format: str
    pages: List[PageDescriptor]
    source: ParseSource
    duplicates: List[str]


class ApprovalResponse(BaseModel):
    page: PageRecord
    job_status: JobStatus


class ApproveAllResponse(BaseModel):
    job_status: JobStatus
    pages_approved: int


class RefeedResponse(BaseModel):
    refeed_payload: RefeedPayload


class RemotePageEntry(BaseModel):
    id: int
    title: str
    slug: str
    url: str
    status: str


class RemotePagesResponse(BaseModel):
    site_key: str
    pages_found: int
    pages: List[RemotePageEntry]

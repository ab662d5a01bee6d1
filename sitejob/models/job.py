from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from sitejob.models.page import PageRecord

JobStatus = Literal[
    "DRAFT",
    "IN_REVIEW",
    "APPROVED",
    "PUBLISHING",
    "PUBLISHED",
    "FAILED",
    "PARTIAL_FAILED",
]

ArtifactStatus = Literal["draft", "review", "approved", "published"]

ARTIFACT_TYPE = "web_site_update"


class RefeedPage(BaseModel):
    source_key: str
    slug: str
    current_html: str
    feedback: str


class RefeedPayload(BaseModel):
    """Revision request handed back to the renderer agent."""

    run_id: str
    brand: str
    agent_suggestion: Literal["web-renderer"] = "web-renderer"
    pages: List[RefeedPage]
    global_feedback: str


class JobMetadata(BaseModel):
    """Mutable job state stored as one blob on the artifact record."""

    brand: str
    site_key: str
    job_status: JobStatus = "DRAFT"
    require_all_approved: bool = False  # enforced by the publish endpoint
    pages: List[PageRecord]
    feedback_payload: Optional[RefeedPayload] = None

    def find_page(self, source_key: str) -> Optional[PageRecord]:
        for page in self.pages:
            if page.source_key == source_key:
                return page
        return None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Artifact(BaseModel):
    id: str
    run_id: str
    type: Literal["web_site_update"] = ARTIFACT_TYPE
    title: str
    content: str  # raw renderer output the job was built from
    status: ArtifactStatus = "draft"
    target: Dict[str, str] = Field(default_factory=dict)
    metadata: JobMetadata
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

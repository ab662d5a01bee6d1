from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    renderer_output: str = Field(min_length=1, description="Raw output of the web-renderer agent.")


class CreateJobRequest(BaseModel):
    run_id: str = Field(min_length=1)
    brand: str = Field(min_length=1, examples=["llif", "bestlife"])
    site_key: str = Field(min_length=1, examples=["llif-staging"])
    renderer_output: str = Field(min_length=1)
    title: Optional[str] = None


class UpdateJobRequest(BaseModel):
    slug_overrides: Optional[Dict[str, str]] = Field(
        default=None,
        description="Mapping of source_key to the new target slug.",
    )
    site_key: Optional[str] = None
    require_all_approved: Optional[bool] = None
    title: Optional[str] = None


class ApprovalRequest(BaseModel):
    decision: Literal["approved", "rejected", "needs_changes"]
    notes: Optional[str] = None


class RequestChangesRequest(BaseModel):
    feedback: str = Field(min_length=1)
    page_key: Optional[str] = Field(
        default=None,
        description="Scope the feedback to a single page by source_key.",
    )

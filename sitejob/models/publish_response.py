from typing import List, Literal, Optional

from pydantic import BaseModel

from sitejob.models.job import JobStatus
from sitejob.models.page import PageResult


class PlannedPublish(BaseModel):
    source_key: str
    title: str
    target_slug: str
    remote_page_id: Optional[int] = None
    action: Literal["create", "update"]


class DryRunResponse(BaseModel):
    dry_run: Literal[True] = True
    pages_to_publish: List[PlannedPublish]


class PublishResponse(BaseModel):
    job_status: JobStatus
    results: List[PageResult]

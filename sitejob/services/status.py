"""Job status machine.

Two rules drive the aggregate status of a website job:

* :func:`compute_pre_publish` runs whenever a page's approval changes.
* :func:`compute_post_publish` runs once after a publish batch.

The move into ``PUBLISHING`` is made by the publish endpoint itself, right
before the batch starts.  Once a job is in a publish-phase status, approval
edits never move it back into review.
"""

from typing import FrozenSet, Iterable, Sequence

from sitejob.models.job import ArtifactStatus, JobStatus
from sitejob.models.page import PageRecord, PageResult

PUBLISH_PHASE: FrozenSet[str] = frozenset({"PUBLISHING", "PUBLISHED", "FAILED", "PARTIAL_FAILED"})


def compute_pre_publish(pages: Sequence[PageRecord], current: JobStatus) -> JobStatus:
    """Recompute the job status from per-page approval states."""
    if current in PUBLISH_PHASE:
        return current

    statuses = [page.approval_status for page in pages]

    if all(s == "approved" for s in statuses):
        return "APPROVED"
    if any(s == "needs_changes" for s in statuses):
        return "IN_REVIEW"
    if any(s == "approved" for s in statuses):
        return "IN_REVIEW"

    return "DRAFT" if current == "DRAFT" else "IN_REVIEW"


def compute_post_publish(results: Iterable[PageResult]) -> JobStatus:
    """Return PUBLISHED, PARTIAL_FAILED or FAILED for all / some / no successful pages."""
    oks = [result.ok for result in results]
    if all(oks):
        return "PUBLISHED"
    if any(oks):
        return "PARTIAL_FAILED"
    return "FAILED"


def artifact_status_after_review(job_status: JobStatus) -> ArtifactStatus:
    """Artifact status to store after an approval edit."""
    return "approved" if job_status == "APPROVED" else "review"


def artifact_status_after_publish(job_status: JobStatus, previous: ArtifactStatus) -> ArtifactStatus:
    """Artifact status to store after a publish batch."""
    return "published" if job_status == "PUBLISHED" else previous

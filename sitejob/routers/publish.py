"""Publish endpoint: pushes a website job's approved pages to WordPress."""

import logging
from datetime import datetime, timezone
from typing import List, Union

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from sitejob import config
from sitejob.config import get_wp_credentials
from sitejob.models.page import PageRecord, PageResult
from sitejob.models.publish_request import PublishRequest
from sitejob.models.publish_response import DryRunResponse, PlannedPublish, PublishResponse
from sitejob.routers.website_job import load_job
from sitejob.services.publisher import apply_publish_results, publish_pages
from sitejob.services.status import artifact_status_after_publish, compute_post_publish
from sitejob.services.store import append_publish_log, save_artifact
from sitejob.services.wordpress import WordPressClient

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/publish", tags=["Publish"])


def _select_pages(pages: List[PageRecord], retry_failed: bool) -> List[PageRecord]:
    approved = [p for p in pages if p.approval_status == "approved"]
    if retry_failed:
        return [p for p in approved if p.publish_status == "failed"]
    return approved


def _plan(pages: List[PageRecord]) -> DryRunResponse:
    return DryRunResponse(
        pages_to_publish=[
            PlannedPublish(
                source_key=p.source_key,
                title=p.title,
                target_slug=p.target_slug,
                remote_page_id=p.remote_page_id,
                action="update" if p.remote_page_id else "create",
            )
            for p in pages
        ]
    )


@router.post(
    "/website-jobs/{artifact_id}",
    response_model=Union[PublishResponse, DryRunResponse],
    summary="Publish the approved pages of a website job",
    description=(
        "Creates or updates every approved page on the brand's WordPress site, "
        "one page at a time.  A page that fails does not stop the others; the "
        "job ends as PUBLISHED, PARTIAL_FAILED or FAILED.\n\n"
        "`dry_run` returns the planned actions without calling WordPress; "
        "`retry_failed` re-attempts only the pages whose last publish failed."
    ),
)
@limiter.limit(config.PUBLISH_RATE_LIMIT)
async def publish_website_job(
    request: Request,
    artifact_id: str,
    body: PublishRequest,
) -> Union[PublishResponse, DryRunResponse]:
    artifact = load_job(artifact_id)
    meta = artifact.metadata

    pages = _select_pages(meta.pages, body.retry_failed)
    if not pages:
        detail = (
            "No failed pages to retry"
            if body.retry_failed
            else "No approved pages to publish. Approve at least one page first."
        )
        raise HTTPException(status_code=400, detail=detail)

    if meta.require_all_approved and any(p.approval_status != "approved" for p in meta.pages):
        raise HTTPException(
            status_code=400,
            detail="This job requires every page to be approved before publishing.",
        )

    if body.dry_run:
        return _plan(pages)

    try:
        creds = get_wp_credentials(meta.brand)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    logger.info(
        "Publish website job",
        extra={"artifact_id": artifact_id, "pages": len(pages), "retry_failed": body.retry_failed},
    )

    meta.job_status = "PUBLISHING"
    save_artifact(artifact)

    async with WordPressClient(creds) as wp:
        results = await publish_pages(pages, wp)

    apply_publish_results(meta.pages, results)

    # The job outcome covers every approved page, not just this batch, so a
    # successful retry of the failed subset completes the job.
    approved_outcomes = [
        PageResult(source_key=p.source_key, ok=p.publish_status == "ok")
        for p in meta.pages
        if p.approval_status == "approved"
    ]
    meta.job_status = compute_post_publish(approved_outcomes)
    artifact.status = artifact_status_after_publish(meta.job_status, artifact.status)
    save_artifact(artifact)

    pages_ok = sum(1 for r in results if r.ok)
    append_publish_log(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "artifact_id": artifact.id,
            "run_id": artifact.run_id,
            "site_key": meta.site_key,
            "job_status": meta.job_status,
            "pages_attempted": len(results),
            "pages_ok": pages_ok,
            "pages_failed": len(results) - pages_ok,
            "results": [r.model_dump() for r in results],
        }
    )

    return PublishResponse(job_status=meta.job_status, results=results)

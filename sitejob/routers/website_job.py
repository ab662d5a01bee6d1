"""Website update jobs: parse preview, creation, slug mapping and approval."""

import logging
from datetime import date

import httpx
from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from sitejob import config
from sitejob.config import get_wp_credentials
from sitejob.models.job import Artifact, JobMetadata
from sitejob.models.job_request import (
    ApprovalRequest,
    CreateJobRequest,
    ParseRequest,
    RequestChangesRequest,
    UpdateJobRequest,
)
from sitejob.models.job_response import (
    ApprovalResponse,
    ApproveAllResponse,
    ParsePreviewResponse,
    ParseSource,
    RefeedResponse,
    RemotePageEntry,
    RemotePagesResponse,
)
from sitejob.models.page import SlugLookupResponse
from sitejob.services.extractor import ExtractionError, extract
from sitejob.services.feedback import build_refeed_payload
from sitejob.services.pages import build_pages, describe_page, make_page
from sitejob.services.resolver import apply_slug_lookups, resolve_page_slugs
from sitejob.services.slugs import validate_slug_uniqueness
from sitejob.services.status import artifact_status_after_review, compute_pre_publish
from sitejob.services.store import create_artifact, load_artifact, save_artifact
from sitejob.services.wordpress import WordPressClient, WordPressError

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/website-jobs", tags=["Website jobs"])


def load_job(artifact_id: str) -> Artifact:
    """Return the stored website job or raise a 404."""
    artifact = load_artifact(artifact_id)
    if artifact is None:
        raise HTTPException(status_code=404, detail="Website job not found")
    return artifact


def _credentials_for(meta: JobMetadata):
    try:
        return get_wp_credentials(meta.brand)
    except ValueError as exc:
        logger.warning("No WordPress credentials for brand %s: %s", meta.brand, exc)
        raise HTTPException(status_code=400, detail=str(exc))


@router.post(
    "/parse",
    response_model=ParsePreviewResponse,
    summary="Preview the pages in renderer output",
    description=(
        "Parses web-renderer output and returns the pages a job would contain, "
        "without creating anything.  Duplicate slugs are reported, not rejected."
    ),
)
@limiter.limit(config.PARSE_RATE_LIMIT)
async def parse_renderer_output(request: Request, body: ParseRequest) -> ParsePreviewResponse:
    if not body.renderer_output.strip():
        raise HTTPException(status_code=400, detail="renderer_output is required")

    try:
        result = extract(body.renderer_output)
    except ExtractionError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    preview_pages = [make_page(p.slug, p.title, p.body_html, p.body_markdown) for p in result.pages]

    return ParsePreviewResponse(
        brand=result.brand,
        content_format=result.content_format,
        pages=[describe_page(p) for p in result.pages],
        source=ParseSource(kind=result.source_kind, embedded_detected=result.embedded_detected),
        duplicates=validate_slug_uniqueness(preview_pages),
    )


@router.post("", response_model=Artifact, status_code=201, summary="Create a website update job")
@limiter.limit(config.JOB_RATE_LIMIT)
async def create_job(request: Request, body: CreateJobRequest) -> Artifact:
    logger.info(
        "Create website job",
        extra={"run_id": body.run_id, "brand": body.brand, "site_key": body.site_key},
    )

    pages = build_pages(body.renderer_output)
    if not pages:
        raise HTTPException(
            status_code=400,
            detail="Could not parse any pages from renderer_output. Check the format.",
        )

    slug_errors = validate_slug_uniqueness(pages)
    if slug_errors:
        raise HTTPException(status_code=400, detail=" ".join(slug_errors))

    metadata = JobMetadata(brand=body.brand, site_key=body.site_key, pages=pages)
    return create_artifact(
        run_id=body.run_id,
        title=body.title or f"Website Update {date.today().isoformat()}",
        content=body.renderer_output,
        metadata=metadata,
    )


@router.get("/{artifact_id}", response_model=Artifact, summary="Get a website update job")
async def get_job(artifact_id: str) -> Artifact:
    return load_job(artifact_id)


@router.patch("/{artifact_id}", response_model=Artifact, summary="Update slug mapping and job settings")
@limiter.limit(config.JOB_RATE_LIMIT)
async def update_job(request: Request, artifact_id: str, body: UpdateJobRequest) -> Artifact:
    artifact = load_job(artifact_id)
    meta = artifact.metadata

    if body.slug_overrides:
        for page in meta.pages:
            override = body.slug_overrides.get(page.source_key)
            if override is not None and override.strip():
                page.target_slug = override.strip()

    slug_errors = validate_slug_uniqueness(meta.pages)
    if slug_errors:
        raise HTTPException(status_code=400, detail=" ".join(slug_errors))

    if body.site_key:
        meta.site_key = body.site_key
        artifact.target["site_key"] = body.site_key
    if body.require_all_approved is not None:
        meta.require_all_approved = body.require_all_approved
    if body.title:
        artifact.title = body.title

    return save_artifact(artifact)


@router.post(
    "/{artifact_id}/pages/{source_key}/approve",
    response_model=ApprovalResponse,
    summary="Record an approval decision for one page",
)
@limiter.limit(config.JOB_RATE_LIMIT)
async def approve_page(
    request: Request, artifact_id: str, source_key: str, body: ApprovalRequest
) -> ApprovalResponse:
    artifact = load_job(artifact_id)
    meta = artifact.metadata

    page = meta.find_page(source_key)
    if page is None:
        raise HTTPException(status_code=404, detail=f'Page "{source_key}" not found in this job')

    page.approval_status = body.decision
    page.approval_notes = body.notes or None

    meta.job_status = compute_pre_publish(meta.pages, meta.job_status)
    artifact.status = artifact_status_after_review(meta.job_status)
    save_artifact(artifact)

    logger.info(
        "Page decision recorded",
        extra={"artifact_id": artifact_id, "source_key": source_key, "decision": body.decision},
    )
    return ApprovalResponse(page=page, job_status=meta.job_status)


@router.post(
    "/{artifact_id}/approve-all",
    response_model=ApproveAllResponse,
    summary="Approve every page of the job",
)
@limiter.limit(config.JOB_RATE_LIMIT)
async def approve_all(request: Request, artifact_id: str) -> ApproveAllResponse:
    artifact = load_job(artifact_id)
    meta = artifact.metadata

    for page in meta.pages:
        page.approval_status = "approved"

    meta.job_status = compute_pre_publish(meta.pages, meta.job_status)
    artifact.status = artifact_status_after_review(meta.job_status)
    save_artifact(artifact)

    return ApproveAllResponse(job_status=meta.job_status, pages_approved=len(meta.pages))


@router.post(
    "/{artifact_id}/request-changes",
    response_model=RefeedResponse,
    summary="Build a revision request for the renderer agent",
)
@limiter.limit(config.JOB_RATE_LIMIT)
async def request_changes(request: Request, artifact_id: str, body: RequestChangesRequest) -> RefeedResponse:
    artifact = load_job(artifact_id)
    meta = artifact.metadata

    try:
        payload = build_refeed_payload(artifact.run_id, meta, body.feedback, body.page_key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f'Page "{body.page_key}" not found in this job')

    meta.feedback_payload = payload
    save_artifact(artifact)
    return RefeedResponse(refeed_payload=payload)


@router.post(
    "/{artifact_id}/validate-slugs",
    response_model=SlugLookupResponse,
    summary="Look up every target slug on the WordPress site",
)
@limiter.limit(config.REMOTE_RATE_LIMIT)
async def validate_slugs(request: Request, artifact_id: str) -> SlugLookupResponse:
    artifact = load_job(artifact_id)
    meta = artifact.metadata
    creds = _credentials_for(meta)

    async with WordPressClient(creds) as wp:
        lookups = await resolve_page_slugs(meta.pages, wp)

    apply_slug_lookups(meta.pages, lookups)
    save_artifact(artifact)
    return SlugLookupResponse(pages=lookups)


@router.get(
    "/{artifact_id}/remote-pages",
    response_model=RemotePagesResponse,
    summary="List the pages that already exist on the job's site",
)
@limiter.limit(config.REMOTE_RATE_LIMIT)
async def remote_pages(request: Request, artifact_id: str) -> RemotePagesResponse:
    artifact = load_job(artifact_id)
    meta = artifact.metadata
    creds = _credentials_for(meta)

    try:
        async with WordPressClient(creds) as wp:
            pages = await wp.list_pages()
    except (WordPressError, httpx.HTTPError) as exc:
        logger.error("Error listing WordPress pages for %s: %s", meta.site_key, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return RemotePagesResponse(
        site_key=meta.site_key,
        pages_found=len(pages),
        pages=[RemotePageEntry(**p._asdict()) for p in pages],
    )

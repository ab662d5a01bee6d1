"""Revision requests sent back to the renderer agent."""

from typing import Optional

from sitejob.models.job import JobMetadata, RefeedPage, RefeedPayload


def build_refeed_payload(
    run_id: str,
    meta: JobMetadata,
    feedback: str,
    page_key: Optional[str] = None,
) -> RefeedPayload:
    """Build a :class:`RefeedPayload` for every page, or only for *page_key*.

    Raises:
        KeyError: if *page_key* does not name a page of the job.
    """
    if page_key:
        pages = [p for p in meta.pages if p.source_key == page_key]
        if not pages:
            raise KeyError(page_key)
    else:
        pages = meta.pages

    return RefeedPayload(
        run_id=run_id,
        brand=meta.brand,
        pages=[
            RefeedPage(
                source_key=p.source_key,
                slug=p.target_slug,
                current_html=p.body,
                feedback=feedback,
            )
            for p in pages
        ],
        global_feedback=feedback,
    )

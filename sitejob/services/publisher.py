"""Batch publishing of job pages to the CMS."""

import logging
from typing import Dict, List, Sequence

from sitejob.models.page import PageRecord, PageResult
from sitejob.services.wordpress import WordPressClient

logger = logging.getLogger(__name__)


async def _publish_one(page: PageRecord, client: WordPressClient) -> PageResult:
    content = page.body

    if page.remote_page_id:
        remote = await client.update_page(page.remote_page_id, title=page.title, content=content)
    else:
        remote = await client.create_page(
            title=page.title,
            slug=page.target_slug,
            content=content,
            status="draft",
        )

    return PageResult(
        source_key=page.source_key,
        ok=True,
        remote_page_id=remote.id,
        link=remote.link,
        status=remote.status,
    )


async def publish_pages(pages: Sequence[PageRecord], client: WordPressClient) -> List[PageResult]:
    """Create or update every page on the CMS, strictly one after another.

    Pages with a cached ``remote_page_id`` are updated; the rest are created
    as drafts under their ``target_slug``.  A failure is recorded in that
    page's result only; later pages are still attempted and nothing is
    raised.  Results are index-aligned with *pages*.
    """
    results: List[PageResult] = []

    for page in pages:
        try:
            result = await _publish_one(page, client)
        except Exception as exc:
            logger.warning("Publish failed for page '%s': %s", page.source_key, exc)
            result = PageResult(source_key=page.source_key, ok=False, error=str(exc) or type(exc).__name__)
        results.append(result)

    ok_count = sum(1 for r in results if r.ok)
    logger.info("Published %d of %d pages", ok_count, len(results))
    return results


def apply_publish_results(pages: Sequence[PageRecord], results: Sequence[PageResult]) -> None:
    """Write publish outcomes back onto the matching pages (by ``source_key``).

    The cached ``remote_page_id`` is kept when a page failed, so a retry
    updates instead of creating a duplicate.
    """
    by_key: Dict[str, PageResult] = {result.source_key: result for result in results}
    for page in pages:
        result = by_key.get(page.source_key)
        if result is None:
            continue
        if result.remote_page_id is not None:
            page.remote_page_id = result.remote_page_id
            page.remote_exists = True
        page.publish_status = "ok" if result.ok else "failed"
        page.publish_result = result

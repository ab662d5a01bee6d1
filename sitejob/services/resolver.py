"""Remote page resolution: which target slugs already exist on the CMS."""

import logging
from typing import Dict, List, Sequence

from sitejob.models.page import PageRecord, SlugLookup
from sitejob.services.wordpress import WordPressClient

logger = logging.getLogger(__name__)


async def resolve_page_slugs(pages: Sequence[PageRecord], client: WordPressClient) -> List[SlugLookup]:
    """Look up every page's ``target_slug`` on the CMS, one request at a time.

    A failed lookup is logged and reported as "not found" (the page will be
    created on publish); it never stops the remaining lookups.  The result
    list is index-aligned with *pages*.
    """
    results: List[SlugLookup] = []

    for page in pages:
        try:
            remote_id = await client.get_page_id_by_slug(page.target_slug)
        except Exception as exc:
            logger.warning("Slug lookup failed for '%s' (%s): %s", page.target_slug, page.source_key, exc)
            remote_id = None

        results.append(
            SlugLookup(
                source_key=page.source_key,
                target_slug=page.target_slug,
                exists=remote_id is not None,
                remote_page_id=remote_id,
            )
        )

    return results


def apply_slug_lookups(pages: Sequence[PageRecord], lookups: Sequence[SlugLookup]) -> None:
    """Cache lookup results on the matching pages (matched by ``source_key``)."""
    by_key: Dict[str, SlugLookup] = {lookup.source_key: lookup for lookup in lookups}
    for page in pages:
        lookup = by_key.get(page.source_key)
        if lookup is None:
            continue
        page.remote_page_id = lookup.remote_page_id
        page.remote_exists = lookup.exists

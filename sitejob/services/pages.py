"""Page model builder: renderer output to the job's working page records."""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from sitejob.models.job_response import PageDescriptor
from sitejob.models.page import PageRecord
from sitejob.services.extractor import ExtractedPage, ExtractionError, extract
from sitejob.services.normalizer import normalize_escapes

logger = logging.getLogger(__name__)


def make_page(
    source_key: str,
    title: str,
    body_html: Optional[str],
    body_markdown: Optional[str],
    target_slug: Optional[str] = None,
) -> PageRecord:
    """Return a fresh :class:`PageRecord` with approval and publish state at defaults."""
    return PageRecord(
        source_key=source_key,
        title=title,
        target_slug=target_slug or source_key,
        body_html=body_html,
        body_markdown=body_markdown,
    )


def page_from_extracted(page: ExtractedPage) -> PageRecord:
    return make_page(page.slug, page.title, page.body_html, page.body_markdown)


def build_pages(raw: str) -> List[PageRecord]:
    """Parse renderer output *raw* into page records.

    Returns ``[]`` for blank input.  Never raises: output that cannot be
    classified becomes a single page holding the whole text as HTML.
    """
    if not raw or not raw.strip():
        return []

    try:
        result = extract(raw)
    except ExtractionError as exc:
        logger.warning("Renderer output not recognised, using it as one raw page: %s", exc)
        body = normalize_escapes(raw.strip())
        return [make_page("page", "Page", body, None)]

    return [page_from_extracted(p) for p in result.pages]


def _word_count(page: ExtractedPage) -> int:
    if page.body_html:
        text = BeautifulSoup(page.body_html, "lxml").get_text(separator=" ", strip=True)
    else:
        text = page.body_markdown or ""
    return len(text.split())


def describe_page(page: ExtractedPage) -> PageDescriptor:
    """Build the preview descriptor shown before a job is created (no body)."""
    body = page.body_html if page.body_html is not None else (page.body_markdown or "")
    return PageDescriptor(
        slug=page.slug,
        title=page.title,
        meta_title=page.meta_title,
        meta_description=page.meta_description,
        body_length=len(body),
        word_count=_word_count(page),
        has_html=page.body_html is not None,
        has_markdown=page.body_markdown is not None,
    )

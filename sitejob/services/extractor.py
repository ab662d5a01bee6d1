"""Page extraction from web-renderer output.

:func:`extract` turns the raw renderer text into an ordered list of
:class:`ExtractedPage` records tagged with where they came from.  Text that
is not JSON at all is a valid input (a bare HTML or Markdown page) and never
raises; :class:`ExtractionError` is reserved for empty input and for JSON
that matches none of the known shapes.
"""

import logging
from typing import Any, List, Literal, Mapping, NamedTuple, Optional

from sitejob.services.detector import detect_shape, parse_structured, prepare_text, trim_input
from sitejob.services.normalizer import normalize_escapes, slugify

logger = logging.getLogger(__name__)

SourceKind = Literal["wrapped", "direct", "raw_string"]

DEFAULT_BRAND = "unknown"
DEFAULT_CONTENT_FORMAT = "html"

ACCEPTED_SHAPES = (
    "{ pages: [...] }, a wrapped web_page artifact, "
    "{ html: '...' } / { body: '...' }, { content: { title, html } }, or a raw HTML string"
)


class ExtractionError(ValueError):
    """Raised when renderer output cannot be turned into pages."""


class ExtractedPage(NamedTuple):
    slug: str
    title: str
    body_html: Optional[str]
    body_markdown: Optional[str]
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class ExtractionResult(NamedTuple):
    pages: List[ExtractedPage]
    source_kind: SourceKind
    embedded_detected: bool
    brand: str = DEFAULT_BRAND
    content_format: str = DEFAULT_CONTENT_FORMAT


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _escaped_or_none(value: Any) -> Optional[str]:
    return normalize_escapes(value) if isinstance(value, str) else None


def _normalize_entry(entry: Any, index: int) -> ExtractedPage:
    """Coerce one element of a renderer ``pages`` list into an :class:`ExtractedPage`."""
    if not isinstance(entry, Mapping):
        entry = {}

    raw_slug = entry.get("slug")
    raw_title = entry.get("title")

    slug = raw_slug.strip() if isinstance(raw_slug, str) else ""
    title = raw_title.strip() if isinstance(raw_title, str) else ""
    title = title or slug or f"Page {index + 1}"
    slug = slug or slugify(title)

    return ExtractedPage(
        slug=slug,
        title=title,
        body_html=_escaped_or_none(entry.get("body_html")),
        body_markdown=_escaped_or_none(entry.get("body_markdown")),
        meta_title=_text_or_none(entry.get("meta_title")),
        meta_description=_text_or_none(entry.get("meta_description")),
    )


def _normalize_pages(entries: List[Any]) -> List[ExtractedPage]:
    return [_normalize_entry(entry, i) for i, entry in enumerate(entries)]


def _brand_of(obj: Mapping) -> str:
    brand = obj.get("brand")
    return brand if isinstance(brand, str) else DEFAULT_BRAND


def _format_of(obj: Mapping) -> str:
    content_format = obj.get("content_format")
    return content_format if isinstance(content_format, str) else DEFAULT_CONTENT_FORMAT


def _single_page(slug: str, title: str, html: str) -> List[ExtractedPage]:
    return [ExtractedPage(slug=slug, title=title, body_html=normalize_escapes(html), body_markdown=None)]


def _content_title(content: Mapping) -> str:
    title = content.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return "Page"


def _extract_embedded(html_field: str) -> Optional[ExtractionResult]:
    """Read a page list serialised inside an envelope's ``content.html``.

    Only one level is unwrapped: an envelope nested inside the envelope is
    not followed.
    """
    ok, inner = parse_structured(prepare_text(html_field))
    if not ok or not isinstance(inner, dict):
        return None

    pages = inner.get("pages")
    if not isinstance(pages, list) or not pages:
        return None

    return ExtractionResult(
        pages=_normalize_pages(pages),
        source_kind="wrapped",
        embedded_detected=True,
        brand=_brand_of(inner),
        content_format=_format_of(inner),
    )


def _extract_wrapped(obj: Mapping) -> ExtractionResult:
    content = obj["content"]
    html_field = content.get("html")

    if not isinstance(html_field, str) or not html_field:
        raise ExtractionError(
            "Wrapped web_page artifact detected but content.html is missing or empty."
        )

    embedded = _extract_embedded(html_field)
    if embedded is not None:
        return embedded

    # content.html is plain HTML, not an embedded page list
    title = _content_title(content)
    return ExtractionResult(
        pages=_single_page(slugify(title), title, html_field),
        source_kind="wrapped",
        embedded_detected=False,
    )


def extract(raw: str) -> ExtractionResult:
    """Extract the pages described by renderer output *raw*.

    Args:
        raw: Unmodified renderer output.

    Returns:
        An :class:`ExtractionResult` with pages in renderer order.

    Raises:
        ExtractionError: if *raw* is blank, or is JSON of an unrecognised shape.
    """
    trimmed = trim_input(raw)
    if not trimmed:
        raise ExtractionError("Empty input: nothing to parse.")

    ok, parsed = parse_structured(prepare_text(trimmed))
    if not ok:
        # Not JSON: the whole text is one page of HTML or Markdown
        return ExtractionResult(
            pages=_single_page("page", "Page", trimmed),
            source_kind="raw_string",
            embedded_detected=False,
        )

    if not isinstance(parsed, dict):
        raise ExtractionError(
            "Expected a JSON object at the top level but received "
            f"{type(parsed).__name__}. Expected one of: {ACCEPTED_SHAPES}."
        )

    shape = detect_shape(parsed)
    logger.debug("Renderer output classified as %s", shape)

    if shape == "wrapped":
        return _extract_wrapped(parsed)

    if shape == "direct_multi":
        return ExtractionResult(
            pages=_normalize_pages(parsed["pages"]),
            source_kind="direct",
            embedded_detected=False,
            brand=_brand_of(parsed),
            content_format=_format_of(parsed),
        )

    if shape == "direct_single":
        html = parsed.get("html")
        if not isinstance(html, str) or not html:
            html = parsed["body"]
        return ExtractionResult(
            pages=_single_page("page", "Page", html),
            source_kind="direct",
            embedded_detected=False,
        )

    if shape == "nested_single":
        content = parsed["content"]
        title = _content_title(content)
        return ExtractionResult(
            pages=_single_page(slugify(title), title, content["html"]),
            source_kind="direct",
            embedded_detected=False,
        )

    raise ExtractionError(f"Could not extract pages from the provided output. Expected one of: {ACCEPTED_SHAPES}.")

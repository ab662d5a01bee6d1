"""Shape detection for web-renderer output.

The renderer agent is an LLM, so its output format is not under our
control.  :func:`detect_shape` classifies an already-parsed JSON object into
one of the shapes the extractor knows how to read; :func:`prepare_text` and
:func:`parse_structured` take care of the text-level artefacts that
surround the JSON.

Shape types
-----------
``"wrapped"``
    Agent output-contract envelope:
    ``{"artifact_type": "web_page", "content": {"title": ..., "html": ...}}``
    where ``content.html`` is usually itself serialised JSON carrying a page
    list (often prefixed with ``json`` or fenced in a code block).

``"direct_multi"``
    ``{"brand": ..., "content_format": ..., "pages": [...]}`` with a
    non-empty page list.

``"direct_single"``
    ``{"html": "..."}`` or ``{"body": "..."}``.

``"nested_single"``
    ``{"content": {"title": ..., "html": ...}}`` without the envelope marker.

``"unknown"``
    Nothing recognisable.
"""

import json
import re
from typing import Any, Literal, Tuple

ShapeType = Literal["wrapped", "direct_multi", "direct_single", "nested_single", "unknown"]

WRAPPED_ARTIFACT_TYPE = "web_page"

_BOM = "\ufeff"

# ```json\n ... \n```  (the language tag is optional)
_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\r?\n", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\r?\n?```\s*$")

# A bare "json" line that LLMs like to emit in front of a JSON blob
_JSON_PREFIX_RE = re.compile(r"^json[ \t]*\r?\n")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    if not text.startswith("```"):
        return text
    text = _FENCE_OPEN_RE.sub("", text, count=1)
    return _FENCE_CLOSE_RE.sub("", text, count=1).strip()


def strip_json_prefix(text: str) -> str:
    return _JSON_PREFIX_RE.sub("", text, count=1).strip()


def trim_input(raw: str) -> str:
    """Strip a byte-order mark and surrounding whitespace."""
    return raw.strip().lstrip(_BOM).strip()


def prepare_text(raw: str) -> str:
    """Strip the BOM, whitespace, code fences and a leading ``json`` line."""
    text = trim_input(raw)
    text = strip_code_fences(text)
    return strip_json_prefix(text)


def parse_structured(text: str) -> Tuple[bool, Any]:
    """Parse *text* as JSON.

    Returns ``(True, value)`` on success and ``(False, None)`` when *text* is
    not valid JSON.
    """
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder can follow
        return False, None


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def detect_shape(obj: Any) -> ShapeType:
    """Classify a parsed JSON value into a :data:`ShapeType`.

    Checks run in priority order; an envelope with ``artifact_type`` wins
    over a top-level page list, which wins over the single-page shapes.
    """
    if not isinstance(obj, dict):
        return "unknown"

    content = obj.get("content")

    if obj.get("artifact_type") == WRAPPED_ARTIFACT_TYPE and isinstance(content, dict):
        return "wrapped"

    pages = obj.get("pages")
    if isinstance(pages, list) and pages:
        return "direct_multi"

    if _non_empty_str(obj.get("html")) or _non_empty_str(obj.get("body")):
        return "direct_single"

    if isinstance(content, dict) and _non_empty_str(content.get("html")):
        return "nested_single"

    return "unknown"

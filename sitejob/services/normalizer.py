"""Data normalisation utilities: literal escape sequences and canonical slugs."""

import re

SLUG_MAX_LENGTH = 80

# Two-character markers whose presence means the text still carries
# JSON-style escapes (e.g. HTML copied out of a JSON string value).
_ESCAPE_MARKERS = ("\\n", "\\t", '\\"', "\\'")

# \r\n is listed first so CRLF collapses to one newline instead of leaving a \r
_ESCAPE_RE = re.compile(r"\\r\\n|\\n|\\t|\\\"|\\'")
_ESCAPE_MAP = {
    "\\r\\n": "\n",
    "\\n": "\n",
    "\\t": "\t",
    '\\"': '"',
    "\\'": "'",
}

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def _has_escapes(s: str) -> bool:
    return any(marker in s for marker in _ESCAPE_MARKERS)


def normalize_escapes(s: str) -> str:
    """Convert literal backslash escapes in *s* to the characters they stand for.

    Clean text is returned as-is, without building a new string. The
    substitution repeats until no escape remains, because folding ``\\\\"``
    produces a fresh ``\\"``; the result is therefore stable under a second
    call.
    """
    if not _has_escapes(s):
        return s

    while _has_escapes(s):
        s = _ESCAPE_RE.sub(lambda m: _ESCAPE_MAP[m.group(0)], s)
    return s


def slugify(text: str) -> str:
    """Return the canonical slug for *text*.

    Lowercased, every run of characters outside ``[a-z0-9]`` collapsed to a
    single hyphen, trimmed of hyphens and cut to 80 characters. Falls back
    to ``"page"`` when nothing survives.
    """
    slug = _NON_ALNUM_RE.sub("-", text.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH] or "page"

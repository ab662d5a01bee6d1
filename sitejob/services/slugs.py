"""Target-slug collision reporting.

Duplicate target slugs are tolerated by the page model; this module only
reports them so the caller can decide whether to block.
"""

from typing import Dict, Iterable, List

from sitejob.models.page import PageRecord


def _quote_keys(keys: List[str]) -> str:
    quoted = [f'"{key}"' for key in keys]
    if len(quoted) == 2:
        return f"{quoted[0]} and {quoted[1]}"
    return ", ".join(quoted[:-1]) + f" and {quoted[-1]}"


def validate_slug_uniqueness(pages: Iterable[PageRecord]) -> List[str]:
    """Return one message per target slug shared by two or more pages.

    Each message names the slug and every ``source_key`` using it, in page
    order.  Returns ``[]`` when all target slugs are distinct.
    """
    # slug -> source keys, in first-seen order (dicts keep insertion order)
    groups: Dict[str, List[str]] = {}
    for page in pages:
        groups.setdefault(page.target_slug, []).append(page.source_key)

    return [
        f'Duplicate target slug "{slug}" used by {_quote_keys(keys)}.'
        for slug, keys in groups.items()
        if len(keys) > 1
    ]

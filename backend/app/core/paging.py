"""Paging Helpers — pure parsing of paging/filter query input and link building.

Invariants:
    - parse_page_index never raises: malformed or negative input yields 0
    - normalize_category maps blank input to None (no filter)
    - build_listing_url always carries the category filter when one is set

Design Decisions:
    - Pagination state is never stored server-side: every page link is rebuilt
      from (category, page) so the filter survives every "Next" click
    - page=0 omitted from URLs: the first page has one canonical link
"""

from urllib.parse import urlencode

LISTING_PATH = "/"


def parse_page_index(raw: str | None) -> int:
    """Lenient page parsing for query strings. Garbage and negatives become 0."""
    if raw is None:
        return 0
    try:
        value = int(raw.strip())
    except (ValueError, AttributeError):
        return 0
    return max(value, 0)


def normalize_category(raw: str | None) -> str | None:
    """Strip surrounding whitespace; empty means no filter."""
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def build_listing_url(category: str | None = None, page_index: int = 0) -> str:
    """Listing URL with the filter threaded through."""
    params: dict[str, str | int] = {}
    if category is not None:
        params["category"] = category
    if page_index > 0:
        params["page"] = page_index
    if not params:
        return LISTING_PATH
    return f"{LISTING_PATH}?{urlencode(params)}"

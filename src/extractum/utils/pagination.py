"""Pagination utilities for GitHub API."""

from collections.abc import Mapping, Sized
from typing import Optional

# GitHub's maximum page size for list endpoints
PAGE_SIZE = 100


def build_page_params(
    params: Optional[Mapping[str, str]],
    page: int,
    per_page: int = PAGE_SIZE,
) -> dict[str, str]:
    """Build query parameters for one page of a list endpoint.

    Args:
        params: Caller's query parameters (kept in order, page params appended)
        page: Page number (1-indexed)
        per_page: Items per page (max 100 for most GitHub APIs)

    Returns:
        New dict with ``page`` and ``per_page`` set as decimal strings
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")

    query = dict(params or {})
    query["page"] = str(page)
    query["per_page"] = str(per_page)
    return query


def is_last_page(items: Sized, per_page: int = PAGE_SIZE) -> bool:
    """Check whether a page is the last one.

    A short page ends the collection. A full page cannot be told apart from
    one followed by more data, so it is never treated as the last.
    """
    return len(items) < per_page

"""Pagination math for result pages and page-button windows.

Pure functions without I/O, deterministic for identical inputs.

Two pieces live here:

* the result page model (``total_pages`` / ``paginate`` / ``result_range``),
  which turns a provider-reported total into page counts;
* the pagination window generator (``visible_pages``), which decides which
  page buttons to render, collapsing long runs into an ellipsis marker.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Union

ELLIPSIS = "…"

# Fixed page size served by the metadata provider.
UPSTREAM_PAGE_SIZE = 20

PageMarker = Union[int, str]


def coerce_total(value: Any) -> int:
    """Normalize an upstream total to a non-negative int.

    Anything that is not a non-negative integer (``None``, negatives, bools,
    fractional floats, garbage strings) degrades to 0 instead of raising.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value >= 0:
            return int(value)
        return 0
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdecimal():
            try:
                return int(stripped)
            except ValueError:
                return 0
    return 0


def total_pages(total: Any, limit: int) -> int:
    """Number of pages needed for ``total`` items at ``limit`` per page.

    ``ceil(total / limit)``; 0 when ``limit <= 0`` or the total is 0.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        return 0
    count = coerce_total(total)
    return max(0, -(-count // limit))


@dataclass(frozen=True)
class PageInfo:
    """Derived pagination state for one result list."""

    page: int
    total_pages: int

    @property
    def has_controls(self) -> bool:
        """Pagination controls are only rendered for more than one page."""
        return self.total_pages > 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def previous_page(self) -> int:
        return max(1, self.page - 1)

    @property
    def next_page(self) -> int:
        return max(1, min(self.total_pages, self.page + 1))


def paginate(total: Any, page: int, limit: int) -> PageInfo:
    """Compute the page count for one result list.

    Args:
        total: Total item count as reported upstream (degrades to 0 if bogus).
        page: Current 1-based page.
        limit: Page size.

    Raises:
        ValueError: If ``page < 1`` or ``limit < 1``.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    return PageInfo(page=page, total_pages=total_pages(total, limit))


@dataclass(frozen=True)
class PageSlice:
    """Slice boundaries of one UI page expressed in upstream pages.

    The provider serves fixed-size pages; a UI page of a different size
    spans one or more of them. ``offset`` indexes into the concatenation of
    the ``upstream`` pages.
    """

    start: int  # absolute 0-based index of the first item
    stop: int  # absolute, exclusive
    upstream: range
    offset: int


def page_slice(
    page: int, limit: int, upstream_limit: int = UPSTREAM_PAGE_SIZE
) -> PageSlice:
    """Map UI ``page`` at ``limit`` per page onto provider pages."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1 or upstream_limit < 1:
        raise ValueError("limit and upstream_limit must be >= 1")
    start = (page - 1) * limit
    stop = page * limit
    first = start // upstream_limit + 1
    last = (stop - 1) // upstream_limit + 1
    return PageSlice(
        start=start,
        stop=stop,
        upstream=range(first, last + 1),
        offset=start - (first - 1) * upstream_limit,
    )


def result_range(page: int, limit: int, total: Any) -> tuple[int, int] | None:
    """1-based ``(start, end)`` of the items on ``page``, or None if empty."""
    count = coerce_total(total)
    if count == 0 or limit <= 0 or page < 1:
        return None
    start = (page - 1) * limit + 1
    end = min(page * limit, count)
    if start > count:
        return None
    return start, end


def visible_pages(current: int, total: int, delta: int = 2) -> list[PageMarker]:
    """Page buttons to display around ``current``.

    Always contains ``1`` and ``total``, plus every page within ``delta`` of
    ``current`` (clipped to ``[2, total - 1]``). A gap on either side is
    collapsed into a single :data:`ELLIPSIS` marker.

    Returns an empty list when ``total <= 1`` (no controls rendered).

    Raises:
        ValueError: If ``current`` lies outside ``[1, total]`` or ``delta < 0``.
    """
    if total <= 1:
        return []
    if not 1 <= current <= total:
        raise ValueError(f"current page {current} outside 1..{total}")
    if delta < 0:
        raise ValueError(f"delta must be >= 0, got {delta}")

    window = range(max(2, current - delta), min(total - 1, current + delta) + 1)

    pages: list[PageMarker] = [1]
    if current - delta > 2:
        pages.append(ELLIPSIS)
    pages.extend(window)
    if current + delta < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages


def activate(marker: PageMarker, current: int) -> int:
    """Resolve a click on ``marker``: integers navigate, the ellipsis is inert."""
    if isinstance(marker, int) and not isinstance(marker, bool):
        return marker
    return current

"""Page arithmetic: slicing, page counts and the sliding page-number window.

Policy:
- ``page_count`` is ``ceil(total / page_size)`` and 0 for an empty collection.
- Page requests are clamped into ``[1, max(page_count, 1)]``; they never raise.
- Changing the page size goes back to page 1.
- The page window shows at most ``size`` (default 5) page numbers, sliding
  so the current page sits in the middle once it is away from both ends::

      pages=10, page=1  -> [1, 2, 3, 4, 5]
      pages=10, page=5  -> [3, 4, 5, 6, 7]
      pages=10, page=9  -> [6, 7, 8, 9, 10]
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_WINDOW_SIZE = 5


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items (0 when empty)."""
    _check_page_size(page_size)
    if total <= 0:
        return 0
    return -(-total // page_size)


def clamp_page(page: int, pages: int) -> int:
    return max(1, min(page, max(pages, 1)))


def paginate(rows: Sequence[Any], page: int, page_size: int) -> List[Any]:
    """Rows of 1-based ``page``; empty past the end, never an error."""
    _check_page_size(page_size)
    page = max(page, 1)
    start = (page - 1) * page_size
    return list(rows[start:start + page_size])


def page_window(page: int, pages: int, size: int = DEFAULT_WINDOW_SIZE) -> List[int]:
    """Page numbers to render as buttons.

    Args:
        page: Current page (clamped first)
        pages: Total page count
        size: Maximum number of buttons

    Returns:
        Ascending list of at most ``size`` page numbers
    """
    if size <= 0:
        raise ValueError(f"window size must be positive, got {size}")
    if pages <= 0:
        return []
    if pages <= size:
        return list(range(1, pages + 1))
    page = clamp_page(page, pages)
    start = page - size // 2
    start = max(1, min(start, pages - size + 1))
    return list(range(start, start + size))


@dataclass
class Pagination:
    """Owned pagination state of one table instance.

    Attributes:
        page: Current 1-based page
        page_size: Rows per page
        total: Number of rows being paginated
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    def __post_init__(self):
        _check_page_size(self.page_size)
        if self.total < 0:
            raise ValueError(f"total must not be negative, got {self.total}")
        self.page = clamp_page(self.page, self.page_count)

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def is_first(self) -> bool:
        return self.page == 1

    @property
    def is_last(self) -> bool:
        return self.page == self.page_count

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def item_range(self) -> Tuple[int, int]:
        """1-based (first, last) item shown on the current page; (0, 0) when empty."""
        if self.total == 0:
            return (0, 0)
        first = self.offset + 1
        return (first, min(self.offset + self.page_size, self.total))

    def go_to_page(self, page: int) -> int:
        """Move to ``page`` (clamped). Returns the page actually selected."""
        clamped = clamp_page(page, self.page_count)
        if clamped != page:
            logger.debug(f"Page {page} clamped to {clamped} (page_count={self.page_count})")
        self.page = clamped
        return self.page

    def next_page(self) -> int:
        if self.has_next:
            self.page += 1
        return self.page

    def prev_page(self) -> int:
        if self.has_prev:
            self.page -= 1
        return self.page

    def set_page_size(self, page_size: int) -> None:
        _check_page_size(page_size)
        self.page_size = page_size
        self.page = 1

    def set_total(self, total: int) -> None:
        if total < 0:
            raise ValueError(f"total must not be negative, got {total}")
        self.total = total
        self.page = clamp_page(self.page, self.page_count)

    def update(self, **fields: int) -> None:
        """Merge ``page``/``page_size``/``total`` and re-establish invariants."""
        unknown = set(fields) - {"page", "page_size", "total"}
        if unknown:
            raise ValueError(f"Unknown pagination fields: {', '.join(sorted(unknown))}")
        page_size = fields.get("page_size", self.page_size)
        total = fields.get("total", self.total)
        _check_page_size(page_size)
        if total < 0:
            raise ValueError(f"total must not be negative, got {total}")
        self.page_size = page_size
        self.total = total
        self.page = clamp_page(fields.get("page", self.page), self.page_count)

    def reset(self) -> None:
        self.page = 1
        self.total = 0

    def window(self, size: int = DEFAULT_WINDOW_SIZE) -> List[int]:
        return page_window(self.page, self.page_count, size)

    def slice(self, rows: Sequence[Any]) -> List[Any]:
        return paginate(rows, self.page, self.page_size)


__all__ = [
    "Pagination",
    "page_count",
    "clamp_page",
    "paginate",
    "page_window",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_WINDOW_SIZE",
]

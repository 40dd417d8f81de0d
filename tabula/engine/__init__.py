"""Client-side tabular data engine.

Leaf-first: sorting, pagination, filters, search, selection, and the
controller that composes them into a render-ready view.
"""
from .columns import Column, format_value
from .controller import (
    PaginationWindow,
    SortIndicator,
    TableState,
    TableView,
    TableViewController,
    ViewRow,
    build_columns,
)
from .filters import FilterState, active_subset, is_active_value
from .pagination import Pagination, page_count, page_window, paginate
from .search import SearchEngine, SearchState
from .selection import Selection
from .sorting import ASC, DESC, SortConfig, sort_rows

__all__ = [
    "ASC",
    "DESC",
    "Column",
    "FilterState",
    "Pagination",
    "PaginationWindow",
    "SearchEngine",
    "SearchState",
    "Selection",
    "SortConfig",
    "SortIndicator",
    "TableState",
    "TableView",
    "TableViewController",
    "ViewRow",
    "active_subset",
    "build_columns",
    "format_value",
    "is_active_value",
    "page_count",
    "page_window",
    "paginate",
    "sort_rows",
]

"""TableViewController - composes sorting, paging, filtering and selection.

Pipeline (fixed order):

    rows (already filtered by the fetch layer)
        -> sort_rows(sort_config)
        -> Pagination.slice()
        -> Selection annotation
        -> TableView

Sorting runs on the whole collection before slicing, so a page always holds
the n-th chunk of the globally sorted rows.

All transitions are synchronous. After each effective change the controller
emits ``changed`` with the TableState of the completed transition, which a
render layer uses as its refresh hook.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple
import logging

from ..signals import Signal
from .columns import Column
from .filters import FilterState
from .pagination import DEFAULT_PAGE_SIZE, DEFAULT_WINDOW_SIZE, Pagination
from .rows import DEFAULT_ID_FIELD, row_id
from .search import SearchEngine, SearchState
from .selection import Selection
from .sorting import SortConfig, sort_rows

logger = logging.getLogger(__name__)


class TableState(Enum):
    IDLE = "idle"
    SORTING = "sorting"
    PAGINATING = "paginating"
    FILTERING = "filtering"
    SEARCHING = "searching"
    SELECTING = "selecting"


@dataclass(frozen=True)
class SortIndicator:
    """Header state of one column."""

    key: str
    label: str
    sortable: bool
    active: bool
    direction: Optional[str]
    arrow: Optional[str]


@dataclass(frozen=True)
class PaginationWindow:
    """Pagination controls for the render layer."""

    page: int
    page_size: int
    total: int
    page_count: int
    pages: Tuple[int, ...]
    has_next: bool
    has_prev: bool
    is_first: bool
    is_last: bool
    first_item: int
    last_item: int


@dataclass(frozen=True)
class ViewRow:
    """One visible row annotated with its selection checkbox."""

    id: Hashable
    row: Any
    selected: bool
    cells: Tuple[Any, ...]


@dataclass(frozen=True)
class TableView:
    """Render-ready output of the controller."""

    rows: Tuple[ViewRow, ...]
    columns: Tuple[Column, ...]
    sort_indicators: Dict[str, SortIndicator]
    pagination: PaginationWindow
    all_selected: bool
    some_selected: bool
    selected_count: int
    active_filters: Dict[str, Any]

    @property
    def visible_rows(self) -> List[Any]:
        return [view_row.row for view_row in self.rows]

    @property
    def visible_ids(self) -> List[Hashable]:
        return [view_row.id for view_row in self.rows]

    @property
    def is_empty(self) -> bool:
        return not self.rows


class TableViewController:
    """One table instance: owns sort, pagination and selection state.

    Signals:
        changed: Emitted with the TableState of each completed transition

    Example:
        table = TableViewController(columns, rows, page_size=10)
        table.changed.connect(lambda state: render(table.view()))
        table.sort_by("created_at")
        table.go_to_page(3)
    """

    def __init__(
        self,
        columns: Iterable[Column],
        rows: Iterable[Any] = (),
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort: Optional[SortConfig] = None,
        filters: Optional[FilterState] = None,
        id_field: str = DEFAULT_ID_FIELD,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        """Initialize table instance.

        Args:
            columns: Column descriptors (fixed for the table's lifetime)
            rows: Initial rows
            page_size: Rows per page
            sort: Initial sort (default: unsorted)
            filters: Filter state whose changes reset the page
            id_field: Row field holding the stable identifier
            window_size: Max page numbers in the pagination window
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.columns: Tuple[Column, ...] = tuple(columns)
        self._columns_by_key = {column.key: column for column in self.columns}
        self.id_field = id_field
        self.window_size = window_size

        self._rows: List[Any] = list(rows)
        self.sort_config = sort or SortConfig()
        self.pagination = Pagination(page_size=page_size, total=len(self._rows))
        self.selection = Selection()

        self._search: Optional[SearchEngine] = None
        self.changed = Signal("table.changed")

        self.filters = filters
        if filters is not None:
            filters.changed.connect(self._on_filters_changed)

    # -- state -----------------------------------------------------------

    @property
    def rows(self) -> List[Any]:
        return list(self._rows)

    @property
    def state(self) -> TableState:
        """IDLE, or SEARCHING while an attached search is debouncing or in flight.

        Sorting, paging, filtering and selecting complete synchronously, so
        they are only visible through the ``changed`` payload.
        """
        if self._search is not None and self._search.pending:
            return TableState.SEARCHING
        return TableState.IDLE

    @property
    def selected(self):
        return self.selection.selected

    def _ids(self, rows: Iterable[Any]) -> List[Hashable]:
        return [row_id(row, self.id_field) for row in rows]

    def _finish(self, state: TableState) -> None:
        logger.debug(f"Table transition: {state.value} -> idle")
        self.changed.emit(state)

    # -- data ------------------------------------------------------------

    def set_rows(self, rows: Iterable[Any], source_ids: Optional[Iterable[Hashable]] = None) -> None:
        """Replace the (already filtered) row collection.

        Args:
            rows: New rows to show
            source_ids: Ids of the unfiltered source collection. Selection is
                reconciled against these so rows hidden by a filter stay
                selected; defaults to the ids of ``rows``.
        """
        self._rows = list(rows)
        self.pagination.set_total(len(self._rows))
        present = source_ids if source_ids is not None else self._ids(self._rows)
        self.selection.reconcile(present)
        self._finish(TableState.FILTERING)

    # -- sorting ---------------------------------------------------------

    def sort_by(self, key: str) -> bool:
        """Header click on ``key``.

        Returns:
            False if the column is unknown or not sortable (nothing changes)
        """
        column = self._columns_by_key.get(key)
        if column is None or not column.sortable:
            logger.debug(f"Ignoring sort request for non-sortable column '{key}'")
            return False
        self.sort_config = self.sort_config.toggled(key)
        self._finish(TableState.SORTING)
        return True

    def set_sort(self, config: SortConfig) -> None:
        if config == self.sort_config:
            return
        self.sort_config = config
        self._finish(TableState.SORTING)

    def clear_sort(self) -> None:
        self.set_sort(SortConfig())

    # -- pagination ------------------------------------------------------

    def _paginate(self, action) -> int:
        before = (self.pagination.page, self.pagination.page_size)
        action()
        if (self.pagination.page, self.pagination.page_size) != before:
            self._finish(TableState.PAGINATING)
        return self.pagination.page

    def go_to_page(self, page: int) -> int:
        return self._paginate(lambda: self.pagination.go_to_page(page))

    def next_page(self) -> int:
        return self._paginate(self.pagination.next_page)

    def prev_page(self) -> int:
        return self._paginate(self.pagination.prev_page)

    def set_page_size(self, page_size: int) -> None:
        self._paginate(lambda: self.pagination.set_page_size(page_size))

    # -- selection -------------------------------------------------------

    def page_ids(self) -> List[Hashable]:
        return self._ids(self._page_rows())

    def toggle_row(self, row_key: Hashable) -> bool:
        selected = self.selection.toggle_one(row_key)
        self._finish(TableState.SELECTING)
        return selected

    def toggle_page(self) -> bool:
        """Select-all checkbox for the visible page."""
        changed = self.selection.toggle_all(self.page_ids())
        if changed:
            self._finish(TableState.SELECTING)
        return changed

    def clear_selection(self) -> None:
        if self.selection.clear():
            self._finish(TableState.SELECTING)

    # -- filtering & search ----------------------------------------------

    def _on_filters_changed(self, active: Dict[str, Any]) -> None:
        self.pagination.go_to_page(1)
        self._finish(TableState.FILTERING)

    def attach_search(self, engine: SearchEngine) -> None:
        """Track a search engine so ``state`` reports SEARCHING while it is pending."""
        if self._search is not None:
            self._search.changed.disconnect(self._on_search_changed)
        self._search = engine
        engine.changed.connect(self._on_search_changed)

    def _on_search_changed(self, state: SearchState) -> None:
        self.changed.emit(TableState.SEARCHING)

    # -- view ------------------------------------------------------------

    def _page_rows(self) -> List[Any]:
        ordered = sort_rows(self._rows, self.sort_config)
        return self.pagination.slice(ordered)

    def sort_indicators(self) -> Dict[str, SortIndicator]:
        indicators = {}
        for column in self.columns:
            arrow = self.sort_config.indicator(column.key) if column.sortable else None
            indicators[column.key] = SortIndicator(
                key=column.key,
                label=column.label,
                sortable=column.sortable,
                active=arrow is not None,
                direction=self.sort_config.direction if arrow is not None else None,
                arrow=arrow,
            )
        return indicators

    def pagination_window(self) -> PaginationWindow:
        p = self.pagination
        first_item, last_item = p.item_range
        return PaginationWindow(
            page=p.page,
            page_size=p.page_size,
            total=p.total,
            page_count=p.page_count,
            pages=tuple(p.window(self.window_size)),
            has_next=p.has_next,
            has_prev=p.has_prev,
            is_first=p.is_first,
            is_last=p.is_last,
            first_item=first_item,
            last_item=last_item,
        )

    def view(self) -> TableView:
        """Derive the render-ready view: sort -> paginate -> annotate."""
        page_rows = self._page_rows()
        ids = self._ids(page_rows)
        view_rows = tuple(
            ViewRow(
                id=rid,
                row=row,
                selected=self.selection.is_selected(rid),
                cells=tuple(column.display(row) for column in self.columns),
            )
            for rid, row in zip(ids, page_rows)
        )
        return TableView(
            rows=view_rows,
            columns=self.columns,
            sort_indicators=self.sort_indicators(),
            pagination=self.pagination_window(),
            all_selected=self.selection.all_selected(ids),
            some_selected=self.selection.some_selected(ids),
            selected_count=len(self.selection),
            active_filters=self.filters.active_filters if self.filters is not None else {},
        )


def build_columns(definitions: Sequence[Any]) -> List[Column]:
    """Accept Column objects or plain mappings (from YAML/JSON)."""
    return [d if isinstance(d, Column) else Column.from_dict(d) for d in definitions]


__all__ = [
    "TableViewController",
    "TableView",
    "TableState",
    "ViewRow",
    "SortIndicator",
    "PaginationWindow",
    "build_columns",
]

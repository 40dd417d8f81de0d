"""Row selection by identifier.

Selection is keyed by row id, not by position, so it survives sorting,
filtering and paging. Ids that disappear from the source collection are
dropped the next time the table reconciles against it.

Select-all semantics (header checkbox):
- checked state reflects the current page only
- if any id on the page is unselected, select every id on the page
- otherwise clear the WHOLE selection, including ids selected on other pages
"""
from __future__ import annotations
from typing import Any, FrozenSet, Hashable, Iterable, Iterator, Optional, Set
import logging

logger = logging.getLogger(__name__)


class Selection:
    """Unordered set of selected row ids."""

    def __init__(self, selected: Optional[Iterable[Hashable]] = None):
        self._selected: Set[Hashable] = set(selected or ())

    @property
    def selected(self) -> FrozenSet[Hashable]:
        return frozenset(self._selected)

    def __contains__(self, row_id: Any) -> bool:
        return row_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(set(self._selected))

    def is_selected(self, row_id: Hashable) -> bool:
        return row_id in self._selected

    def all_selected(self, page_ids: Iterable[Hashable]) -> bool:
        """Checked state of the select-all box for the given page."""
        ids = list(page_ids)
        return bool(ids) and all(row_id in self._selected for row_id in ids)

    def some_selected(self, page_ids: Iterable[Hashable]) -> bool:
        """Indeterminate state: some, but not all, page ids are selected."""
        ids = list(page_ids)
        hits = sum(1 for row_id in ids if row_id in self._selected)
        return 0 < hits < len(ids)

    def toggle_one(self, row_id: Hashable) -> bool:
        """Flip one id.

        Returns:
            True if the id is selected afterwards
        """
        if row_id in self._selected:
            self._selected.discard(row_id)
            return False
        self._selected.add(row_id)
        return True

    def toggle_all(self, page_ids: Iterable[Hashable]) -> bool:
        """Header checkbox click for the current page.

        Returns:
            True if the selection changed
        """
        ids = list(page_ids)
        if not ids:
            return False
        if self.all_selected(ids):
            logger.debug(f"Select-all cleared {len(self._selected)} selected ids")
            self._selected.clear()
        else:
            self._selected.update(ids)
        return True

    def select(self, row_ids: Iterable[Hashable]) -> None:
        self._selected.update(row_ids)

    def clear(self) -> bool:
        if not self._selected:
            return False
        self._selected.clear()
        return True

    def reconcile(self, present_ids: Iterable[Hashable]) -> Set[Hashable]:
        """Drop ids missing from the source collection.

        Returns:
            The ids that were dropped
        """
        present = set(present_ids)
        dropped = self._selected - present
        if dropped:
            self._selected -= dropped
            logger.debug(f"Dropped {len(dropped)} stale selected ids")
        return dropped


__all__ = ["Selection"]

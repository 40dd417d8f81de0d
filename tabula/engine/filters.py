"""FilterState - composable filter map with an active-subset view.

Data flow is unidirectional:

    User Action -> FilterState.set_filter() -> changed(active_filters) -> fetch layer

The fetch layer (REST client, in-memory filter, CLI) decides what to do with
the active snapshot; this module never filters rows itself.

State policy:
- A value is *active* unless it is None, "", the sentinel "all", NaN, or not
  a string/number at all (type mismatches are ignored, never rejected).
- Keys with declared ``options`` only accept values from that list; anything
  else is treated as inactive.
- Free-text search is the pseudo-filter ``"search"`` and follows the same rule.
- ``reset()`` restores the seed map, ``reset_one(key)`` restores one seed
  value (or "" when the seed had none).

Loop prevention:
- State deduplication: ``changed`` fires only when the active subset
  actually changes, exactly once per change. Moving a key between two
  inactive values (e.g. "" -> "all") is stored but not announced.
- Swapping the callback (``set_on_change``) is not a state change.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
import logging
import math
import numbers

from ..signals import Signal

logger = logging.getLogger(__name__)

ALL = "all"
SEARCH_KEY = "search"

FilterCallback = Callable[[Dict[str, Any]], Any]


def is_active_value(value: Any) -> bool:
    """Active-value predicate shared by every filter key."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != "" and value != ALL
    if isinstance(value, numbers.Number):
        if isinstance(value, complex):
            return False
        try:
            return not math.isnan(value)
        except (TypeError, ValueError):
            return True
    return False


def active_subset(filters: Mapping, options: Optional[Mapping] = None) -> Dict[str, Any]:
    """Entries of ``filters`` that pass the active-value predicate (and ``options``)."""
    options = options or {}
    active: Dict[str, Any] = {}
    for key, value in filters.items():
        if not is_active_value(value):
            continue
        allowed = options.get(key)
        if allowed is not None and value not in allowed:
            logger.debug(f"Ignoring out-of-range value {value!r} for filter '{key}'")
            continue
        active[key] = value
    return active


class FilterState:
    """Filter map seeded from caller defaults.

    Example usage:
        filters = FilterState({"status": "published"}, on_change=refetch)

        filters.set_filter("status", "draft")   # refetch({"status": "draft"})
        filters.set_search("wed")               # refetch({"status": "draft", "search": "wed"})
        filters.reset()                         # refetch({"status": "published"})
    """

    def __init__(
        self,
        initial: Optional[Mapping] = None,
        on_change: Optional[FilterCallback] = None,
        options: Optional[Mapping[str, Iterable[Any]]] = None,
    ):
        """Initialize with the seed map.

        Args:
            initial: Seed filter values; restored by reset()
            on_change: Called with the active snapshot after each effective change
            options: Allowed values per select-style key
        """
        self._seed: Dict[str, Any] = dict(initial or {})
        self._filters: Dict[str, Any] = dict(self._seed)
        self._options: Dict[str, Tuple[Any, ...]] = {
            key: tuple(values) for key, values in (options or {}).items()
        }
        self._active = active_subset(self._filters, self._options)
        self.changed = Signal("filters.changed")
        self._on_change: Optional[FilterCallback] = None
        if on_change is not None:
            self.set_on_change(on_change)
        logger.debug(f"FilterState initialized with seed {self._seed}")

    @property
    def filters(self) -> Dict[str, Any]:
        return dict(self._filters)

    @property
    def seed(self) -> Dict[str, Any]:
        return dict(self._seed)

    @property
    def options(self) -> Dict[str, Tuple[Any, ...]]:
        return dict(self._options)

    @property
    def active_filters(self) -> Dict[str, Any]:
        return dict(self._active)

    @property
    def has_active_filters(self) -> bool:
        return bool(self._active)

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def search(self) -> str:
        value = self._filters.get(SEARCH_KEY)
        return value if isinstance(value, str) else ""

    def get(self, key: str, default: Any = None) -> Any:
        return self._filters.get(key, default)

    def set_on_change(self, callback: Optional[FilterCallback]) -> None:
        """Replace the change callback without emitting a notification."""
        if self._on_change is not None:
            self.changed.disconnect(self._on_change)
        self._on_change = callback
        if callback is not None:
            self.changed.connect(callback)

    def set_filter(self, key: str, value: Any) -> bool:
        """Set one filter value.

        Returns:
            True if the active filters changed (the raw value is stored either way)
        """
        return self._apply({**self._filters, key: value})

    def set_filters(self, partial: Mapping) -> bool:
        """Merge several filter values in one change."""
        return self._apply({**self._filters, **partial})

    def set_search(self, term: Optional[str]) -> bool:
        return self.set_filter(SEARCH_KEY, term if term is not None else "")

    def reset(self) -> bool:
        """Restore the seed map (not an empty map)."""
        return self._apply(dict(self._seed))

    def reset_one(self, key: str) -> bool:
        """Restore ``key`` to its seed value, or "" if the seed had none."""
        seed_value = self._seed.get(key)
        return self.set_filter(key, seed_value if seed_value is not None else "")

    def _apply(self, new_filters: Dict[str, Any]) -> bool:
        self._filters = new_filters
        new_active = active_subset(new_filters, self._options)
        if new_active == self._active:
            logger.debug("Active filters unchanged, skipping emission")
            return False

        self._active = new_active

        logger.info(f"Filters changed: active={self._active}")

        self.changed.emit(dict(self._active))
        return True


__all__ = ["FilterState", "is_active_value", "active_subset", "ALL", "SEARCH_KEY"]

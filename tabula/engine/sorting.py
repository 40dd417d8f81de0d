"""Single-column stable sorting.

Ordering rules:
- ``SortConfig.key is None`` means "unsorted": input order is preserved.
- Values are compared by their natural ordering (numbers numerically,
  strings lexicographically, dates chronologically).
- Missing values (absent key, None, NaN) sort as the minimum, so they lead
  an ascending sort and trail a descending one.
- Rows whose values compare equal keep their input order in BOTH
  directions (``sorted(..., reverse=True)`` is stable).

Rows holding values of different runtime types under the same key are
grouped by type (numbers < strings < dates < anything else) instead of
raising ``TypeError``.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple
import logging
import math
import numbers

from .rows import get_value

logger = logging.getLogger(__name__)

ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)

ARROWS = {ASC: "↑", DESC: "↓"}

# Type ranks for the mixed-type total order
_MISSING = 0
_NUMBER = 1
_TEXT = 2
_TEMPORAL = 3
_OTHER = 4


@dataclass(frozen=True)
class SortConfig:
    """Immutable sort state.

    Attributes:
        key: Column key to sort by (None = preserve input order)
        direction: "asc" or "desc"
    """

    key: Optional[str] = None
    direction: str = ASC

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Sort direction must be one of {DIRECTIONS}, got {self.direction!r}")

    @property
    def is_sorted(self) -> bool:
        return self.key is not None

    @property
    def descending(self) -> bool:
        return self.direction == DESC

    def toggled(self, key: str) -> SortConfig:
        """Apply the header-click rule.

        Same key flips asc <-> desc; a new key starts ascending.
        """
        if key == self.key:
            return SortConfig(key=key, direction=DESC if self.direction == ASC else ASC)
        return SortConfig(key=key, direction=ASC)

    def cleared(self) -> SortConfig:
        return SortConfig()

    def indicator(self, column_key: str) -> Optional[str]:
        """Arrow for ``column_key`` if it is the active sort column."""
        if self.key is None or column_key != self.key:
            return None
        return ARROWS[self.direction]


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def sort_key(value: Any) -> Tuple:
    """Total-order key for a single cell value."""
    if value is None:
        return (_MISSING,)
    if isinstance(value, float) and math.isnan(value):
        return (_MISSING,)
    if isinstance(value, Decimal) and value.is_nan():
        return (_MISSING,)
    if isinstance(value, (numbers.Real, Decimal)):
        return (_NUMBER, value)
    if isinstance(value, str):
        return (_TEXT, value)
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return (_TEMPORAL, _naive_utc(value))
    if isinstance(value, date):
        return (_TEMPORAL, datetime.combine(value, time.min))
    return (_OTHER, str(value))


def sort_rows(rows: Iterable[Any], config: SortConfig) -> List[Any]:
    """Return a new list of ``rows`` ordered by ``config``.

    The input collection is never mutated.

    Args:
        rows: Rows to order
        config: Active sort state

    Returns:
        New list; same order as ``rows`` when ``config.key`` is None
    """
    if config.key is None:
        return list(rows)
    key = config.key
    ordered = sorted(rows, key=lambda row: sort_key(get_value(row, key)), reverse=config.descending)
    logger.debug(f"Sorted {len(ordered)} rows by {key} {config.direction}")
    return ordered


__all__ = ["SortConfig", "sort_rows", "sort_key", "ASC", "DESC", "ARROWS"]

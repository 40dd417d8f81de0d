"""Column descriptors and default cell formatting."""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from .rows import get_value

MISSING_TEXT = "-"
COLUMN_TYPES = ("text", "number", "date", "datetime", "boolean", "status")

Renderer = Callable[[Any, Any], Any]


def format_boolean_check(value: Any) -> str:
    """Format boolean as check/cross mark.

    Args:
        value: Boolean value

    Returns:
        '✓' for True, '✗' for False
    """
    return "✓" if value else "✗"


def parse_temporal(value: Any) -> Optional[datetime]:
    """Read a date, datetime or ISO-8601 string; None when unparseable."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def format_value(value: Any, kind: str = "text") -> Any:
    """Default renderer for a cell.

    Args:
        value: Raw cell value
        kind: Column type (text, number, date, datetime, boolean, status)

    Returns:
        Display value; "-" for missing values
    """
    if value is None:
        return MISSING_TEXT
    if kind == "boolean":
        return format_boolean_check(value)
    if kind in ("date", "datetime"):
        parsed = parse_temporal(value)
        if parsed is None:
            return str(value)
        if kind == "date":
            return parsed.date().isoformat()
        return parsed.strftime("%Y-%m-%d %H:%M")
    if kind == "number":
        return value
    return str(value)


@dataclass(frozen=True)
class Column:
    """Declarative column descriptor.

    Attributes:
        key: Row field shown in this column (also the sort key)
        label: Header text (defaults to the key)
        sortable: Whether header clicks sort by this column
        type: Formatting hint for the default renderer
        render: Optional ``(value, row) -> display`` override
    """

    key: str
    label: str = ""
    sortable: bool = False
    type: str = "text"
    render: Optional[Renderer] = None

    def __post_init__(self):
        if not self.key:
            raise ValueError("Column key must not be empty")
        if self.type not in COLUMN_TYPES:
            raise ValueError(f"Unknown column type {self.type!r} for column '{self.key}'")
        if not self.label:
            object.__setattr__(self, "label", self.key.replace("_", " ").title())

    def display(self, row: Any) -> Any:
        value = get_value(row, self.key)
        if self.render is not None:
            return self.render(value, row)
        return format_value(value, self.type)

    @classmethod
    def from_dict(cls, data: Mapping) -> Column:
        """Build a column from a plain mapping (YAML/JSON table definitions)."""
        if "key" not in data:
            raise ValueError(f"Column definition without key: {dict(data)}")
        return cls(
            key=str(data["key"]),
            label=str(data.get("label") or ""),
            sortable=bool(data.get("sortable", False)),
            type=str(data.get("type", "text")),
        )


__all__ = ["Column", "format_value", "format_boolean_check", "parse_temporal", "MISSING_TEXT", "COLUMN_TYPES"]

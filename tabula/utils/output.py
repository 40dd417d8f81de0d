"""Output formatting utilities for consistent CLI reporting."""

from __future__ import annotations
from typing import Any, List, TYPE_CHECKING

import click

if TYPE_CHECKING:
    from ..engine.controller import TableView


def section_header(text: str) -> str:
    """Format a section header with color.

    Args:
        text: Header text

    Returns:
        Formatted header string
    """
    return click.style(f"▶ {text}", fg='cyan', bold=True)


def success(text: str, prefix: str = "✓") -> str:
    return f"{click.style(prefix, fg='green')} {text}"


def error(text: str, prefix: str = "✗") -> str:
    return f"{click.style(prefix, fg='red')} {text}"


def warning(text: str, prefix: str = "⚠") -> str:
    return f"{click.style(prefix, fg='yellow')} {text}"


def info(text: str) -> str:
    return f"  {click.style('•', fg='blue')} {text}"


def count_badge(count: int, label: str, color: str = 'cyan') -> str:
    """Format a count badge.

    Args:
        count: Count to display
        label: Label for the count
        color: Color for the count (default: cyan)

    Returns:
        Formatted count badge
    """
    return f"{click.style(str(count), fg=color, bold=True)} {label}"


def _checkbox(checked: bool, partial: bool = False) -> str:
    if checked:
        return "[x]"
    return "[-]" if partial else "[ ]"


def format_table(view: TableView) -> List[str]:
    """Render a TableView as plain text lines (header, rows, pager).

    Column widths fit the widest header or cell on the current page.
    """
    headers = []
    for column in view.columns:
        indicator = view.sort_indicators[column.key]
        headers.append(f"{column.label} {indicator.arrow}" if indicator.arrow else column.label)

    cells: List[List[str]] = [[str(cell) for cell in row.cells] for row in view.rows]
    widths = [len(h) for h in headers]
    for row_cells in cells:
        for index, cell in enumerate(row_cells):
            widths[index] = max(widths[index], len(cell))

    def line(box: str, values: List[Any]) -> str:
        padded = [str(value).ljust(widths[index]) for index, value in enumerate(values)]
        return f"{box} " + " | ".join(padded)

    lines = [line(_checkbox(view.all_selected, view.some_selected), headers)]
    lines.append("-" * len(lines[0]))
    if not view.rows:
        lines.append("    (no rows)")
    for view_row, row_cells in zip(view.rows, cells):
        lines.append(line(_checkbox(view_row.selected), row_cells))

    p = view.pagination
    window = " ".join(f"[{n}]" if n == p.page else str(n) for n in p.pages)
    lines.append("")
    lines.append(
        f"Page {p.page} of {p.page_count} | rows {p.first_item}-{p.last_item} of {p.total}"
        + (f" | {window}" if window else "")
    )
    if view.selected_count:
        lines.append(f"{view.selected_count} selected")
    return lines


__all__ = [
    "section_header",
    "success",
    "error",
    "warning",
    "info",
    "count_badge",
    "format_table",
]

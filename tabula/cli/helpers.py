from __future__ import annotations
import csv
import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import click
import yaml

from ..config import coerce_scalar, load_typed_config
from ..engine.columns import Column, parse_temporal
from ..engine.controller import build_columns
from ..engine.filters import SEARCH_KEY
from ..engine.rows import get_value
from ..version import __version__

DATE_FROM = "date_from"
DATE_TO = "date_to"
DEFAULT_DATE_FIELD = "created_at"


@dataclass
class TableSource:
    """Rows plus optional table definition loaded from a file."""
    rows: List[Any]
    columns: List[Column]
    filters: Dict[str, Any] = field(default_factory=dict)
    options: Dict[str, List[Any]] = field(default_factory=dict)


def _read_csv(path: Path) -> List[Dict[str, Any]]:
    with path.open(newline='', encoding='utf-8') as fh:
        return [
            {key: (coerce_scalar(value) if value not in (None, "") else None) for key, value in record.items()}
            for record in csv.DictReader(fh)
        ]


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    text = path.read_text(encoding='utf-8')
    if suffix == '.json':
        return json.loads(text)
    if suffix in ('.yaml', '.yml'):
        return yaml.safe_load(text)
    raise click.BadParameter(f"Unsupported file type '{suffix}' (use .json, .csv, .yaml)", param_hint='SOURCE')


def load_table_source(path: Path | str) -> TableSource:
    """Load a table source file.

    Accepts a plain list of rows, or a mapping with ``rows`` and optional
    ``columns``, ``filters`` (seed values) and ``options`` (allowed values).
    Without column definitions every field of the first row becomes a
    sortable column.
    """
    path = Path(path)
    if path.suffix.lower() == '.csv':
        data: Any = _read_csv(path)
    else:
        data = _read_document(path)

    if isinstance(data, list):
        data = {'rows': data}
    if not isinstance(data, dict) or not isinstance(data.get('rows', []), list):
        raise click.BadParameter("Expected a list of rows or a mapping with a 'rows' list", param_hint='SOURCE')

    rows = data.get('rows') or []
    column_defs = data.get('columns')
    if column_defs:
        try:
            columns = build_columns(column_defs)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint='SOURCE')
    elif rows and isinstance(rows[0], dict):
        columns = [Column(key=str(key), sortable=True) for key in rows[0].keys()]
    else:
        columns = []

    return TableSource(
        rows=rows,
        columns=columns,
        # YAML reads bare dates as date objects; filter values are strings
        filters={key: (value.isoformat() if isinstance(value, date) else value)
                 for key, value in (data.get('filters') or {}).items()},
        options={key: list(values) for key, values in (data.get('options') or {}).items()},
    )


def parse_assignments(values: Sequence[str]) -> Dict[str, Any]:
    """Parse repeated ``KEY=VALUE`` options (values coerced like env vars)."""
    result: Dict[str, Any] = {}
    for item in values:
        if '=' not in item:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint='--filter')
        key, value = item.split('=', 1)
        result[key.strip()] = coerce_scalar(value) if value.strip() else ""
    return result


def _date_bound(value: Any, key: str) -> date:
    parsed = parse_temporal(value if isinstance(value, date) else str(value))
    if parsed is None:
        raise click.BadParameter(f"Invalid date '{value}' (use YYYY-MM-DD)", param_hint=key)
    return parsed.date()


def filter_rows(
    rows: Sequence[Any],
    active: Dict[str, Any],
    search_fields: Sequence[str] = (),
    date_field: str = DEFAULT_DATE_FIELD,
) -> List[Any]:
    """Reference fetch layer: exact match per active filter, substring search.

    Values are compared by their string form so "2024" matches 2024.
    ``date_from`` / ``date_to`` are inclusive bounds on ``date_field``; rows
    without a readable date there are excluded while a bound is active.
    """
    needle = str(active.get(SEARCH_KEY, "")).casefold()
    lower = _date_bound(active[DATE_FROM], DATE_FROM) if DATE_FROM in active else None
    upper = _date_bound(active[DATE_TO], DATE_TO) if DATE_TO in active else None
    criteria: List[Tuple[str, str]] = [
        (k, str(v)) for k, v in active.items() if k not in (SEARCH_KEY, DATE_FROM, DATE_TO)
    ]
    matched = []
    for row in rows:
        if any(str(get_value(row, key)) != expected for key, expected in criteria):
            continue
        if lower is not None or upper is not None:
            stamp = parse_temporal(get_value(row, date_field))
            if stamp is None:
                continue
            day = stamp.date()
            if (lower is not None and day < lower) or (upper is not None and day > upper):
                continue
        if needle:
            fields = search_fields or (list(row.keys()) if isinstance(row, dict) else [])
            if not any(needle in str(get_value(row, f, "")).casefold() for f in fields):
                continue
        matched.append(row)
    return matched


@click.group()
@click.version_option(version=__version__, prog_name="tabula-engine")
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Override the configured log level')
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Inspect tabular data through the tabula engine.

    \b
    Examples:
      tabula view albums.yaml --sort title --page 2
      tabula view albums.json --filter status=published --select 7
      tabula view albums.json --filter date_from=2024-01-01 --filter date_to=2024-03-31
      tabula search albums.csv wedding --field title
      tabula config --section search
    """
    if isinstance(ctx.obj, dict):
        if log_level:
            ctx.obj['log_level'] = log_level.upper()
        return
    overrides = {'log_level': log_level.upper()} if log_level else None
    ctx.obj = load_typed_config(overrides).to_dict()


__all__ = [
    "cli",
    "TableSource",
    "load_table_source",
    "parse_assignments",
    "filter_rows",
    "DATE_FROM",
    "DATE_TO",
]

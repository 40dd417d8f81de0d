"""Table view command."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Tuple

import click

from .helpers import DEFAULT_DATE_FIELD, cli, filter_rows, load_table_source, parse_assignments
from ..config import coerce_scalar
from ..engine.controller import TableViewController
from ..engine.filters import FilterState
from ..engine.rows import row_id
from ..engine.sorting import SortConfig, DESC, ASC
from ..utils.output import count_badge, format_table, info, section_header, warning

logger = logging.getLogger(__name__)


@cli.command(name="view")
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option('--sort', 'sort_key', help='Column key to sort by')
@click.option('--desc', is_flag=True, help='Sort descending')
@click.option('--page', type=int, default=1, show_default=True, help='Page to show (clamped)')
@click.option('--page-size', type=int, default=None, help='Rows per page (default from config)')
@click.option('--filter', 'filters', multiple=True, metavar='KEY=VALUE', help='Filter value (repeatable); "search" does substring search, "date_from"/"date_to" bound the date field')
@click.option('--reset-filters', is_flag=True, help='Restore the seed filters of SOURCE after applying --filter')
@click.option('--select', 'select_ids', multiple=True, metavar='ID', help='Select a row id (repeatable)')
@click.pass_context
def view(ctx: click.Context, source: str, sort_key: str | None, desc: bool, page: int, page_size: int | None,
         filters: Tuple[str, ...], reset_filters: bool, select_ids: Tuple[str, ...]):
    """Print one page of SOURCE (.json, .csv or .yaml) as a table.

    Filtering happens outside the engine: each filter change hands the
    active filters to a refetch step that narrows the rows, then the engine
    sorts, pages and annotates the selection.
    """
    cfg = ctx.obj
    table_cfg = cfg['table']
    data = load_table_source(source)
    if not data.columns:
        click.echo(warning("No columns found in source"))
        return

    id_field = table_cfg.get('id_field', 'id')
    if page_size is not None and page_size <= 0:
        raise click.BadParameter("must be positive", param_hint='--page-size')

    if sort_key and sort_key not in {c.key for c in data.columns}:
        raise click.BadParameter(f"Unknown column '{sort_key}'", param_hint='--sort')

    filter_state = FilterState(data.filters, options=data.options)
    table = TableViewController(
        data.columns,
        data.rows,
        page_size=page_size or table_cfg['page_size'],
        sort=SortConfig(sort_key, DESC if desc else ASC) if sort_key else None,
        id_field=id_field,
        filters=filter_state,
        window_size=table_cfg.get('page_window', 5),
    )
    source_ids = [row_id(row, id_field) for row in data.rows]

    date_field = table_cfg.get('date_field', DEFAULT_DATE_FIELD)

    def refetch(active):
        matched = filter_rows(data.rows, active, date_field=date_field)
        logger.debug(f"Refetch with {active}: {len(matched)} rows")
        table.set_rows(matched, source_ids=source_ids)

    # Ids unknown to SOURCE are dropped by the first refetch
    table.selection.select(coerce_scalar(rid) for rid in select_ids)

    filter_state.changed.connect(refetch)
    # Seed filters apply before any change
    refetch(filter_state.active_filters)

    if filters:
        filter_state.set_filters(parse_assignments(filters))
    if reset_filters:
        filter_state.reset()

    table.go_to_page(page)

    view_data = table.view()
    click.echo(section_header(f"{Path(source).name} ({count_badge(len(data.rows), 'rows')})"))
    if filter_state.has_active_filters:
        active = ", ".join(f"{k}={v}" for k, v in filter_state.active_filters.items())
        click.echo(info(f"Filters ({count_badge(filter_state.active_count, 'active')}): {active}"))
    for line in format_table(view_data):
        click.echo(line)


__all__ = ["view"]

"""Debounced search command."""

from __future__ import annotations
import asyncio
import logging
from typing import Tuple

import click

from .helpers import cli, load_table_source
from ..engine.columns import Column
from ..engine.controller import TableViewController
from ..engine.search import SearchEngine, SearchState
from ..lookups import HttpLookup, rows_lookup
from ..utils.output import count_badge, error, format_table, success, warning

logger = logging.getLogger(__name__)


async def run_search(engine: SearchEngine, terms: Tuple[str, ...]) -> SearchState:
    """Type ``terms`` one after another, then wait for the engine to settle."""
    for term in terms:
        engine.set_term(term)
    await engine.wait_settled()
    return engine.state


@cli.command(name="search")
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.argument('terms', nargs=-1, required=True)
@click.option('--field', 'fields', multiple=True, help='Row field to search (repeatable; default from config or all fields)')
@click.option('--debounce-ms', type=int, default=None, help='Debounce window (default from config)')
@click.option('--min-length', type=int, default=None, help='Minimum term length (default from config)')
@click.option('--threshold', type=float, default=None, help='Fuzzy match threshold 0-100 (default from config)')
@click.option('--url', default=None, help='Search this REST endpoint instead (SOURCE then only supplies columns)')
@click.pass_context
def search(ctx: click.Context, source: str, terms: Tuple[str, ...], fields: Tuple[str, ...],
           debounce_ms: int | None, min_length: int | None, threshold: float | None, url: str | None):
    """Fuzzy-search SOURCE rows, or query a REST endpoint with --url.

    Several TERMS are typed in quick succession, as keystrokes would be; the
    debounce window collapses them so only the last one is looked up.
    Timeout and query parameter of --url come from the ``http`` config section.
    """
    cfg = ctx.obj
    search_cfg = cfg['search']
    data = load_table_source(source)

    if url:
        lookup = HttpLookup.from_config(cfg['http'], url)
    else:
        lookup = rows_lookup(
            data.rows,
            fields=list(fields) or search_cfg.get('fields') or None,
            threshold=threshold if threshold is not None else search_cfg['fuzzy_threshold'],
        )
    try:
        engine = SearchEngine(
            lookup,
            debounce_ms=debounce_ms if debounce_ms is not None else search_cfg['debounce_ms'],
            min_length=min_length if min_length is not None else search_cfg['min_length'],
            immediate=search_cfg.get('immediate', False),
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    state = asyncio.run(run_search(engine, terms))

    if state.error:
        click.echo(error(f"Search failed: {state.error}"), err=True)
        ctx.exit(1)
    if len(state.term) < engine.min_length:
        click.echo(warning(f"Term '{state.term}' is shorter than {engine.min_length} characters; nothing looked up"))
        return

    found = len(state.results)
    issued = engine.lookups_issued
    click.echo(success(f"{count_badge(found, 'result' if found == 1 else 'results')} for '{state.term}' "
                       f"({count_badge(issued, 'lookup' if issued == 1 else 'lookups')} issued)"))
    if state.results:
        columns = data.columns or [Column(key='value')]
        table = TableViewController(columns, state.results, page_size=max(found, 1),
                                    id_field=cfg['table'].get('id_field', 'id'))
        for line in format_table(table.view()):
            click.echo(line)


__all__ = ["search", "run_search"]

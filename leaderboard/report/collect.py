"""Collection & assembly of a leaderboard message from a document context."""

from __future__ import annotations

import logging

from leaderboard.compute import normalize_rows, order_records, resolve_header, resolve_layout
from leaderboard.report.constants import DEFAULT_HEURISTICS, DEFAULT_TITLE, ORDERS, Heuristics, Schema
from leaderboard.source.discovery import DocumentContext, discover_table

from .formatters import compose_message, fallback_message
from .models import LeaderboardContext, RawTable
from .render import render_block

log = logging.getLogger(__name__)


def build_from_table(
    rows: RawTable,
    *,
    source: str,
    schema: Schema,
    order: str | None = None,
    max_rows: int | None = None,
    title: str = DEFAULT_TITLE,
    heur: Heuristics = DEFAULT_HEURISTICS,
) -> LeaderboardContext:
    """Run header resolution through rendering on one discovered table."""
    order = order or schema.order
    if order not in ORDERS:
        raise ValueError(f"Unsupported order: {order} (choose from {', '.join(ORDERS)})")
    limit = max_rows if max_rows is not None else schema.max_rows
    table = resolve_header(rows, schema, heur)
    if len(table) < 2:
        log.warning("no usable leaderboard table (%d rows) at %s", len(table), source)
        return LeaderboardContext(
            source=source,
            schema=schema.key,
            order=order,
            table=table,
            layout=None,
            records=[],
            block=None,
            message=fallback_message(source),
        )
    header, data = table[0], table[1:]
    layout = resolve_layout(header, data, schema, heur)
    records = normalize_rows(data, layout, schema, limit)
    records = order_records(records, order, rank_resolved=layout.roles.rank is not None)
    block = render_block(records, schema)
    return LeaderboardContext(
        source=source,
        schema=schema.key,
        order=order,
        table=table,
        layout=layout,
        records=records,
        block=block,
        message=compose_message(block, source, title),
    )


def build_leaderboard_context(
    context: DocumentContext,
    *,
    source: str,
    schema: Schema,
    order: str | None = None,
    max_rows: int | None = None,
    title: str = DEFAULT_TITLE,
    heur: Heuristics = DEFAULT_HEURISTICS,
) -> LeaderboardContext:
    rows = discover_table(context, heur, tracks_ties=schema.tracks_ties)
    log.debug("discovered table with %d rows", len(rows))
    return build_from_table(
        rows, source=source, schema=schema, order=order, max_rows=max_rows, title=title, heur=heur
    )

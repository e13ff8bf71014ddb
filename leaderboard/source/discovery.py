"""Locate the standings table inside a tree of document contexts."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol, Sequence

from leaderboard.report.constants import DEFAULT_HEURISTICS, Heuristics
from leaderboard.report.models import RawTable

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TableSnapshot:
    """A table's cell matrix plus its flattened lowercase text."""
    rows: RawTable
    text: str


class DocumentContext(Protocol):
    """Anything that can list its tables and its nested sub-documents."""

    def tables(self) -> Sequence[TableSnapshot]: ...
    def children(self) -> Sequence[DocumentContext]: ...


@dataclass
class StaticContext:
    """In-memory context, mostly for tests and saved snapshots."""
    snapshots: list[TableSnapshot]
    nested: list[StaticContext] | None = None

    @classmethod
    def from_rows(cls, *tables: RawTable, nested: list[StaticContext] | None = None) -> StaticContext:
        snaps = [
            TableSnapshot(rows=t, text=" ".join(" ".join(r) for r in t).lower()) for t in tables
        ]
        return cls(snaps, nested)

    def tables(self) -> Sequence[TableSnapshot]:
        return self.snapshots

    def children(self) -> Sequence[StaticContext]:
        return self.nested or []


def score_table(text: str, heur: Heuristics = DEFAULT_HEURISTICS, *, tracks_ties: bool = False) -> int:
    keys = ["rank", "name", "wins", "losses", "points"]
    if tracks_ties:
        keys += ["ties", "record"]
    score = 0
    for key in keys:
        pattern = heur.score_patterns.get(key)
        if pattern and re.search(pattern, text):
            score += heur.score_weights.get(key, 0)
    return score


def best_table(
    snapshots: Sequence[TableSnapshot], heur: Heuristics = DEFAULT_HEURISTICS, *, tracks_ties: bool = False
) -> RawTable:
    best: TableSnapshot | None = None
    best_score = heur.score_floor
    for snap in snapshots:
        s = score_table(snap.text, heur, tracks_ties=tracks_ties)
        log.debug("table %dx%d scored %d", len(snap.rows), max((len(r) for r in snap.rows), default=0), s)
        if s > best_score:
            best, best_score = snap, s
    if best is None and snapshots:
        best = snapshots[0]
    return [list(r) for r in best.rows] if best is not None else []


def discover_table(
    context: DocumentContext, heur: Heuristics = DEFAULT_HEURISTICS, *, tracks_ties: bool = False
) -> RawTable:
    """Best table in ``context``; nested contexts are searched only when it yields no rows."""
    found = best_table(context.tables(), heur, tracks_ties=tracks_ties)
    if found:
        return found
    for child in context.children():
        found = discover_table(child, heur, tracks_ties=tracks_ties)
        if found:
            return found
    return []


def concat_pages(pages: Sequence[RawTable], *, max_pages: int | None = None) -> RawTable:
    """Join per-page row batches, keeping the first page's header once.

    A later page's first row is dropped only when it repeats that header.
    """
    batches = [p for p in pages if p]
    if max_pages is not None:
        batches = batches[: max(0, max_pages)]
    if not batches:
        return []
    merged: RawTable = [list(r) for r in batches[0]]
    header = [c.strip().lower() for c in merged[0]]
    for page in batches[1:]:
        first = [c.strip().lower() for c in page[0]]
        rows = page[1:] if first == header else page
        merged.extend(list(r) for r in rows)
    return merged

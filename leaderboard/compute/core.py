from __future__ import annotations

import re
from typing import Sequence

from leaderboard.report.constants import ORDER_RANK, ORDER_SOURCE, ORDER_WIN_LOSS_NAME, Schema
from leaderboard.report.models import ColumnLayout, CompetitorRecord, RawTable

_INT_RE = re.compile(r"[+-]?\d+")
_RANK_RE = re.compile(r"(?:#|t-?)?\s*(\d+)(?:st|nd|rd|th)?\.?", re.IGNORECASE)
_NUMERICISH_RE = re.compile(r"[\d\s.,:%+\-/]+")
_RECORD_2_RE = re.compile(r"(\d+)\s*[-:]\s*(\d+)")
_RECORD_3_RE = re.compile(r"(\d+)\s*-\s*(\d+)\s*-\s*(\d+)")


def parse_int(value: object) -> int | None:
    """Integer value of a cell, or ``None``. Never raises."""
    if value is None:
        return None
    s = str(value).strip()
    if not _INT_RE.fullmatch(s):
        return None
    return int(s)


def parse_rank(value: object) -> int | None:
    """Like :func:`parse_int` but tolerant of ``#1``, ``1.``, ``T3`` and ``2nd``."""
    if value is None:
        return None
    m = _RANK_RE.fullmatch(str(value).strip())
    return int(m.group(1)) if m else None


def is_numericish(value: str) -> bool:
    return bool(value) and _NUMERICISH_RE.fullmatch(value) is not None


def cell(row: Sequence[str], index: int | None) -> str:
    """Trimmed cell text; out-of-range or unresolved reads as an empty string."""
    if index is None or index < 0 or index >= len(row):
        return ""
    return (row[index] or "").strip()


def table_width(rows: Sequence[Sequence[str]]) -> int:
    return max((len(r) for r in rows), default=0)


def record_pattern(fields: int) -> re.Pattern[str]:
    return _RECORD_3_RE if fields >= 3 else _RECORD_2_RE


def split_record(value: str, fields: int) -> tuple[int, ...] | None:
    m = record_pattern(fields).fullmatch(value.strip())
    if not m:
        return None
    return tuple(int(g) for g in m.groups())


def normalize_rows(
    data_rows: RawTable,
    layout: ColumnLayout,
    schema: Schema,
    max_rows: int | None = None,
) -> list[CompetitorRecord]:
    roles = layout.roles
    record_fields = 3 if schema.tracks_ties else 2
    rows = data_rows if max_rows is None else data_rows[: max(0, max_rows)]
    out: list[CompetitorRecord] = []
    for row in rows:
        wins = parse_int(cell(row, roles.wins)) or 0
        losses = parse_int(cell(row, roles.losses)) or 0
        ties = parse_int(cell(row, roles.ties)) or 0
        if layout.record_column is not None:
            parts = split_record(cell(row, layout.record_column), record_fields) or (0,) * record_fields
            wins, losses = parts[0], parts[1]
            if record_fields == 3:
                ties = parts[2]
        out.append(
            CompetitorRecord(
                name=cell(row, roles.name),
                rank=parse_rank(cell(row, roles.rank)) if roles.rank is not None else None,
                wins=wins,
                losses=losses,
                ties=ties,
                points=cell(row, roles.points) if roles.points is not None else None,
            )
        )
    return out


def _rank_order(records: list[CompetitorRecord]) -> list[CompetitorRecord]:
    # Unranked rows stay in their slots; ranked rows are sorted stably into the remaining ones.
    slots = [i for i, r in enumerate(records) if r.rank is not None]
    ranked = sorted((records[i] for i in slots), key=lambda r: r.rank)
    out = list(records)
    for i, rec in zip(slots, ranked):
        out[i] = rec
    return out


def order_records(
    records: list[CompetitorRecord], order: str, *, rank_resolved: bool = True
) -> list[CompetitorRecord]:
    if order == ORDER_SOURCE:
        return list(records)
    if order == ORDER_RANK:
        return _rank_order(records) if rank_resolved else list(records)
    if order == ORDER_WIN_LOSS_NAME:
        return sorted(records, key=lambda r: (-r.wins, r.losses, r.name))
    raise ValueError(f"Unsupported order: {order}")

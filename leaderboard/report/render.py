"""Fixed-width rendering with deterministic formatting.

Rows are laid out in monospace columns inside a code fence so chat clients
keep the alignment.
"""
from __future__ import annotations
from typing import Sequence

from .constants import (
    CODE_FENCE,
    COUNT_WIDTH,
    ELLIPSIS,
    FIELD_SEPARATOR,
    NAME_WIDTH,
    POINTS_WIDTH,
    RANK_WIDTH,
    Schema,
)
from .models import CompetitorRecord


def fit_name(name: str, width: int = NAME_WIDTH) -> str:
    """Truncate to ``width`` (ellipsis included) and left-pad to ``width``."""
    if len(name) > width:
        name = name[: width - 1] + ELLIPSIS
    return name.ljust(width)


def fit_right(text: str, width: int) -> str:
    """Right-align in exactly ``width`` chars; longer values keep their head plus an ellipsis."""
    if len(text) > width:
        text = text[: width - 1] + ELLIPSIS
    return text.rjust(width)


def _field(record: CompetitorRecord, role: str) -> str:
    if role == "rank":
        return fit_right("" if record.rank is None else str(record.rank), RANK_WIDTH)
    if role == "name":
        return fit_name(record.name)
    if role == "points":
        return fit_right(record.points or "", POINTS_WIDTH)
    return fit_right(str(getattr(record, role)), COUNT_WIDTH)


def render_line(record: CompetitorRecord, schema: Schema) -> str:
    return FIELD_SEPARATOR.join(_field(record, role) for role in schema.fields)


def render_block(records: Sequence[CompetitorRecord], schema: Schema) -> str:
    lines = [CODE_FENCE, schema.header]
    lines.extend(render_line(r, schema) for r in records)
    lines.append(CODE_FENCE)
    return "\n".join(lines)

"""Header resolution and column-role inference.

Roles are resolved tier by tier: exact label, partial label, then statistics
over the data rows. Each tier takes the RoleMap produced by the previous one
and returns a new map, so a role resolved early is never revisited. A
combined record column is looked for between the label tiers and the
statistical tier; when one is found, wins/losses/ties are not guessed from
other numeric columns. Statistical candidates skip every claimed column,
which keeps guesses off the name, points and rank columns.
"""

from __future__ import annotations

import logging
import re
from functools import reduce
from typing import Callable, Sequence

from leaderboard.report.constants import DEFAULT_HEURISTICS, ROLES, Heuristics, Schema
from leaderboard.report.models import ColumnLayout, RawTable, RoleMap

from .core import cell, is_numericish, parse_int, record_pattern, table_width

log = logging.getLogger(__name__)

COUNT_ROLES = ("wins", "losses", "ties")


def _matches_role(label: str, role: str, heur: Heuristics) -> bool:
    if not label:
        return False
    if label in heur.exact_labels.get(role, ()):
        return True
    pattern = heur.partial_patterns.get(role)
    return bool(pattern and re.search(pattern, label))


def looks_like_header(row: Sequence[str], heur: Heuristics = DEFAULT_HEURISTICS) -> bool:
    """True when at least one cell reads like a role label."""
    labels = [c.strip().lower() for c in row]
    return any(_matches_role(label, role, heur) for label in labels for role in ROLES)


def synthesize_header(width: int, schema: Schema) -> list[str]:
    header = [""] * width
    for i, label in enumerate(schema.synth_labels[:width]):
        header[i] = label
    return header


def resolve_header(rows: RawTable, schema: Schema, heur: Heuristics = DEFAULT_HEURISTICS) -> RawTable:
    """Return ``rows`` with a usable header row first.

    A first row that does not look like a header is treated as data and a
    canonical header for ``schema`` is prepended.
    """
    if not rows:
        return []
    if looks_like_header(rows[0], heur):
        return [list(r) for r in rows]
    log.debug("first row has no role labels; synthesizing %s header", schema.key)
    return [synthesize_header(len(rows[0]), schema)] + [list(r) for r in rows]


# --- tiers ---------------------------------------------------------------

Tier = Callable[[RoleMap, list[str], RawTable, Schema, Heuristics], RoleMap]


def _tier_exact(roles: RoleMap, header: list[str], data: RawTable, schema: Schema, heur: Heuristics) -> RoleMap:
    for role in ROLES:
        if roles.get(role) is not None:
            continue
        labels = heur.exact_labels.get(role, ())
        claimed = roles.claimed()
        for idx, label in enumerate(header):
            if idx not in claimed and label in labels:
                roles = roles.assign(role, idx)
                break
    return roles


def _tier_partial(roles: RoleMap, header: list[str], data: RawTable, schema: Schema, heur: Heuristics) -> RoleMap:
    for role in ROLES:
        pattern = heur.partial_patterns.get(role)
        if roles.get(role) is not None or not pattern:
            continue
        claimed = roles.claimed()
        for idx, label in enumerate(header):
            if idx not in claimed and label and re.search(pattern, label):
                roles = roles.assign(role, idx)
                break
    return roles


def _name_scores(data: RawTable, width: int) -> list[int]:
    scores = [0] * width
    for row in data:
        for idx in range(width):
            value = cell(row, idx)
            if value and not is_numericish(value):
                scores[idx] += len(value)
    return scores


def _infer_name(roles: RoleMap, data: RawTable, width: int, reserved: set[int]) -> RoleMap:
    if roles.name is not None or width == 0:
        return roles
    taken = roles.claimed() | reserved
    candidates = [i for i in range(width) if i not in taken] or list(range(width))
    scores = _name_scores(data, width)
    best = candidates[0]
    for idx in candidates[1:]:
        if scores[idx] > scores[best]:
            best = idx
    # name outranks any role that already holds the chosen column
    previous = roles.owner(best)
    if previous is not None:
        log.debug("name takes column %d from %s", best, previous)
        roles = roles.assign(previous, None)
    return roles.assign("name", best)


def _numeric_values(data: RawTable, idx: int) -> list[int]:
    values = []
    for row in data:
        v = parse_int(cell(row, idx))
        if v is not None:
            values.append(v)
    return values


def _infer_rank(roles: RoleMap, data: RawTable, width: int, heur: Heuristics, reserved: set[int]) -> RoleMap:
    if roles.rank is not None:
        return roles
    taken = roles.claimed() | reserved
    for idx in range(width):
        if idx in taken:
            continue
        values = _numeric_values(data, idx)
        if len(values) < 2:
            continue
        diffs = [b - a for a, b in zip(values, values[1:])]
        share = sum(1 for d in diffs if d == 1) / len(diffs)
        if share > heur.rank_step_share:
            return roles.assign("rank", idx)
    return roles


def _count_candidates(roles: RoleMap, data: RawTable, width: int, heur: Heuristics) -> list[int]:
    claimed = roles.claimed()
    ranked: list[tuple[int, int, int, int]] = []
    for idx in range(width):
        if idx in claimed:
            continue
        values = _numeric_values(data, idx)
        if not values:
            continue
        small = sum(1 for v in values if 0 <= v <= heur.small_int_ceiling)
        ranked.append((-small, -len(values), max(values), idx))
    ranked.sort()
    return [idx for *_, idx in ranked]


def _tier_statistical(
    roles: RoleMap,
    header: list[str],
    data: RawTable,
    schema: Schema,
    heur: Heuristics,
    record_column: int | None = None,
) -> RoleMap:
    width = max(len(header), table_width(data))
    reserved = set() if record_column is None else {record_column}
    roles = _infer_name(roles, data, width, reserved)
    roles = _infer_rank(roles, data, width, heur, reserved)
    if record_column is not None:
        # counts come from the combined column's captures
        return roles
    wanted = [r for r in COUNT_ROLES if roles.get(r) is None and (r != "ties" or schema.tracks_ties)]
    for role, idx in zip(wanted, _count_candidates(roles, data, width, heur)):
        roles = roles.assign(role, idx)
    return roles


LABEL_TIERS: tuple[Tier, ...] = (_tier_exact, _tier_partial)


def label_roles(
    header: Sequence[str],
    data: RawTable,
    schema: Schema,
    heur: Heuristics = DEFAULT_HEURISTICS,
) -> RoleMap:
    """Roles resolved from the header text alone (exact, then partial labels)."""
    labels = [c.strip().lower() for c in header]
    return reduce(lambda roles, tier: tier(roles, labels, data, schema, heur), LABEL_TIERS, RoleMap())


def infer_roles(
    header: Sequence[str],
    data: RawTable,
    schema: Schema,
    heur: Heuristics = DEFAULT_HEURISTICS,
    record_column: int | None = None,
) -> RoleMap:
    labels = [c.strip().lower() for c in header]
    explicit = label_roles(labels, data, schema, heur)
    return _tier_statistical(explicit, labels, data, schema, heur, record_column)


def detect_record_column(
    data: RawTable,
    roles: RoleMap,
    schema: Schema,
    heur: Heuristics = DEFAULT_HEURISTICS,
) -> int | None:
    """Index of a column holding combined ``W-L`` (or ``W-L-T``) tokens.

    ``roles`` is the label-resolved map; a wins/losses pair named in the
    header disables detection.
    """
    if roles.wins is not None and roles.losses is not None:
        return None
    if not data:
        return None
    pattern = record_pattern(3 if schema.tracks_ties else 2)
    for idx in range(table_width(data)):
        if idx == roles.name:
            continue
        hits = sum(1 for row in data if pattern.fullmatch(cell(row, idx)))
        if hits / len(data) > heur.record_hit_rate:
            return idx
    return None


def resolve_layout(
    header: Sequence[str],
    data: RawTable,
    schema: Schema,
    heur: Heuristics = DEFAULT_HEURISTICS,
) -> ColumnLayout:
    explicit = label_roles(header, data, schema, heur)
    record_column = detect_record_column(data, explicit, schema, heur)
    roles = infer_roles(header, data, schema, heur, record_column)
    log.debug("roles=%s record_column=%s", roles.as_dict(), record_column)
    return ColumnLayout(roles=roles, record_column=record_column)

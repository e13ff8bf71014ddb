# constants.py
# Centralized heuristic tunables and output schemas. Do not change values without bumping schema_version.

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from typing import Any

import yaml

SCHEMA_VERSION = "1.0.0"

ROLES = ("rank", "name", "wins", "losses", "ties", "points")

# Formatting
NAME_WIDTH = 24
RANK_WIDTH = 2
POINTS_WIDTH = 3
COUNT_WIDTH = 2
FIELD_SEPARATOR = "  "
ELLIPSIS = "…"
CODE_FENCE = "```"

DEFAULT_TITLE = "*Daily Challonge leaderboard*"
NO_TABLE_MESSAGE = "No leaderboard table found."

ORDER_RANK = "rank"
ORDER_SOURCE = "source"
ORDER_WIN_LOSS_NAME = "win-loss-name"
ORDERS = (ORDER_RANK, ORDER_SOURCE, ORDER_WIN_LOSS_NAME)


def _exact_labels() -> dict[str, tuple[str, ...]]:
    return {
        "rank": ("#", "rank", "pos", "position"),
        "name": ("name", "player", "team"),
        "wins": ("w", "win", "wins"),
        "losses": ("l", "loss", "losses"),
        "ties": ("t", "tie", "ties", "draw", "draws"),
        "points": ("pts", "points", "score"),
    }


def _partial_patterns() -> dict[str, str]:
    return {
        "rank": r"rank|#|\bpos\b|position|place",
        "name": r"name|player|team|participant|competitor",
        "wins": r"\bwins?\b|\bwon\b",
        "losses": r"loss|\blost\b",
        "ties": r"\bties?\b|draw",
        "points": r"pts|points|score",
    }


def _score_patterns() -> dict[str, str]:
    return {
        "rank": r"rank|#",
        "name": r"name|player|team",
        "wins": r"wins|\bw\b",
        "losses": r"losses|\bl\b",
        "points": r"points|pts|score",
        "ties": r"ties?\b|draws?\b",
        "record": r"\d+\s*-\s*\d+",
    }


def _score_weights() -> dict[str, int]:
    return {"rank": 2, "name": 2, "wins": 1, "losses": 1, "points": 1, "ties": 1, "record": 1}


def _role_item(key: str, role: str, item: Any) -> Any:
    """Validate one per-role override; bad values raise ``ValueError``."""
    where = f"heuristics.{key}.{role}"
    if key == "exact_labels":
        if isinstance(item, str):
            item = [item]
        if not isinstance(item, (list, tuple)) or not all(isinstance(v, (str, int)) for v in item):
            raise ValueError(f"{where} must be a label or a list of labels")
        return tuple(str(v).strip().lower() for v in item)
    if key == "score_weights":
        if isinstance(item, bool) or not isinstance(item, (int, str)):
            raise ValueError(f"{where} must be an integer")
        try:
            return int(item)
        except ValueError as exc:
            raise ValueError(f"{where} must be an integer") from exc
    if not isinstance(item, str):
        raise ValueError(f"{where} must be a regular expression string")
    try:
        re.compile(item)
    except re.error as exc:
        raise ValueError(f"{where} is not a valid pattern: {exc}") from exc
    return item


@dataclass(frozen=True)
class Heuristics:
    """Keyword lists, weights and thresholds used by discovery and inference."""

    exact_labels: dict[str, tuple[str, ...]] = field(default_factory=_exact_labels)
    partial_patterns: dict[str, str] = field(default_factory=_partial_patterns)
    score_patterns: dict[str, str] = field(default_factory=_score_patterns)
    score_weights: dict[str, int] = field(default_factory=_score_weights)
    score_floor: int = 0
    record_hit_rate: float = 0.6
    rank_step_share: float = 0.6
    small_int_ceiling: int = 50

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "Heuristics":
        """Overlay ``data`` on the defaults. Per-role tables merge key by key."""
        base = cls()
        if not data:
            return base
        if not isinstance(data, dict):
            raise ValueError("heuristics config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown heuristics keys: {sorted(unknown)}")
        changes: dict[str, Any] = {}
        for key, value in data.items():
            current = getattr(base, key)
            if isinstance(current, dict):
                if not isinstance(value, dict):
                    raise ValueError(f"heuristics.{key} must be a mapping")
                merged = dict(current)
                for role, item in value.items():
                    merged[role] = _role_item(key, str(role), item)
                changes[key] = merged
            elif isinstance(current, float):
                try:
                    changes[key] = float(value)
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"heuristics.{key} must be a number") from exc
            else:
                try:
                    changes[key] = int(value)
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"heuristics.{key} must be an integer") from exc
        return replace(base, **changes)


DEFAULT_HEURISTICS = Heuristics()


def load_heuristics(path: str | None) -> Heuristics:
    """Read heuristic overrides from a YAML file; ``None`` yields the defaults."""
    if not path:
        return DEFAULT_HEURISTICS
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid heuristics file {path}: {exc}") from exc
    return Heuristics.from_mapping(data)


@dataclass(frozen=True, slots=True)
class Schema:
    key: str
    fields: tuple[str, ...]
    header: str
    synth_labels: tuple[str, ...]
    order: str
    max_rows: int | None

    @property
    def tracks_ties(self) -> bool:
        return "ties" in self.fields


SCHEMAS: dict[str, Schema] = {
    "ranked": Schema(
        key="ranked",
        fields=("rank", "name", "points", "wins", "losses"),
        header="#  Name                      Pts   W   L",
        synth_labels=("Rank", "Name", "W", "L", "Pts"),
        order=ORDER_RANK,
        max_rows=None,
    ),
    "record": Schema(
        key="record",
        fields=("name", "wins", "losses"),
        header="Name                      W   L",
        synth_labels=("Name", "W", "L"),
        order=ORDER_WIN_LOSS_NAME,
        max_rows=12,
    ),
    "wlt": Schema(
        key="wlt",
        fields=("name", "wins", "losses", "ties"),
        header="Name                      W   L   T",
        synth_labels=("Name", "W", "L", "T"),
        order=ORDER_SOURCE,
        max_rows=12,
    ),
}


def get_schema(key: str) -> Schema:
    try:
        return SCHEMAS[key.strip().lower()]
    except KeyError:
        raise ValueError(f"Unsupported schema: {key} (choose from {', '.join(SCHEMAS)})") from None

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any

RawTable = list[list[str]]


@dataclass(frozen=True, slots=True)
class RoleMap:
    """Column index per role; ``None`` means unresolved."""
    rank: int | None = None
    name: int | None = None
    wins: int | None = None
    losses: int | None = None
    ties: int | None = None
    points: int | None = None

    def get(self, role: str) -> int | None:
        return getattr(self, role)

    def assign(self, role: str, index: int | None) -> RoleMap:
        return replace(self, **{role: index})

    def claimed(self) -> set[int]:
        return {idx for idx in self.as_dict().values() if idx is not None}

    def owner(self, index: int) -> str | None:
        for role, idx in self.as_dict().items():
            if idx == index:
                return role
        return None

    def as_dict(self) -> dict[str, int | None]:
        return {
            "rank": self.rank,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points": self.points,
        }


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    roles: RoleMap
    record_column: int | None = None


@dataclass(frozen=True, slots=True)
class CompetitorRecord:
    name: str
    rank: int | None = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "rank": self.rank,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points": self.points,
        }


@dataclass(slots=True)
class LeaderboardContext:
    source: str
    schema: str
    order: str
    table: RawTable
    layout: ColumnLayout | None
    records: list[CompetitorRecord]
    block: str | None
    message: str

    @property
    def found(self) -> bool:
        return self.block is not None

    def to_json_payload(self, schema_version: str) -> dict[str, Any]:
        base: dict[str, Any] = {
            "schema_version": schema_version,
            "source": self.source,
            "schema": self.schema,
            "order": self.order,
            "found": self.found,
            "table_rows": len(self.table),
            "records": [r.to_dict() for r in self.records],
            "message": self.message,
        }
        if self.layout is not None:
            base["roles"] = self.layout.roles.as_dict()
            base["record_column"] = self.layout.record_column
        return base

"""Output format helpers for leaderboard contexts.

The text message is what the webhook receives; the JSON form carries the
resolved column roles and typed records for debugging a misbehaving page.
"""

from __future__ import annotations
import json

from .constants import DEFAULT_TITLE, NO_TABLE_MESSAGE
from .models import LeaderboardContext


def compose_message(block: str, source: str, title: str = DEFAULT_TITLE) -> str:
    return "\n".join([title, block, source])


def fallback_message(source: str) -> str:
    return "\n".join([NO_TABLE_MESSAGE, source])


def format_text(ctx: LeaderboardContext) -> str:
    return ctx.message


def format_json(ctx: LeaderboardContext, schema_version: str, *, pretty: bool = False) -> str:
    payload = ctx.to_json_payload(schema_version)
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

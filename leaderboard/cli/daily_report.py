from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

import requests

from leaderboard.api.client import PageClient, webhook_payload
from leaderboard.report.collect import build_leaderboard_context
from leaderboard.report.constants import (
    DEFAULT_TITLE,
    ORDERS,
    SCHEMA_VERSION,
    SCHEMAS,
    get_schema,
    load_heuristics,
)
from leaderboard.report.formatters import format_json, format_text
from leaderboard.source.html import HtmlDocument

SOURCE_URL = os.environ.get("LEADERBOARD_URL", "")
WEBHOOK_URL = os.environ.get("LEADERBOARD_WEBHOOK_URL", "")
SCHEMA = os.environ.get("LEADERBOARD_SCHEMA", "ranked")
TITLE = os.environ.get("LEADERBOARD_TITLE", DEFAULT_TITLE)
WEBHOOK_FIELD = os.environ.get("LEADERBOARD_WEBHOOK_FIELD", "content")
HEURISTICS_FILE = os.environ.get("LEADERBOARD_HEURISTICS")

log = logging.getLogger(__name__)


def _env_positive_int(name: str) -> int | None:
    raw = os.environ.get(name)
    try:
        value = int(raw) if raw else None
    except ValueError:
        value = None
    return value if value and value > 0 else None


MAX_ROWS = _env_positive_int("LEADERBOARD_MAX_ROWS")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text}")
    return value


def generate_daily_report(
    *,
    url: str = SOURCE_URL,
    html_file: str | None = None,
    schema: str = SCHEMA,
    order: str | None = None,
    max_rows: int | None = MAX_ROWS,
    title: str = TITLE,
    heuristics_file: str | None = HEURISTICS_FILE,
    webhook_url: str = WEBHOOK_URL,
    webhook_field: str = WEBHOOK_FIELD,
    output_format: str = "text",
    dry_run: bool = False,
    client: PageClient | None = None,
) -> dict[str, Any]:
    schema_obj = get_schema(schema)
    heur = load_heuristics(heuristics_file)
    client = client or PageClient()
    if html_file:
        html = Path(html_file).read_text(encoding="utf-8")
    elif url:
        html = client.get_text(url)
    else:
        raise ValueError("No source: pass --url, --html-file or set LEADERBOARD_URL")
    document = HtmlDocument(html, url=url, fetch=client.get_text)
    ctx = build_leaderboard_context(
        document,
        source=url or html_file or "",
        schema=schema_obj,
        order=order,
        max_rows=max_rows,
        title=title,
        heur=heur,
    )

    fmt = output_format.lower()
    if fmt == "text":
        content = format_text(ctx)
    elif fmt == "json":
        content = format_json(ctx, SCHEMA_VERSION, pretty=True)
    else:
        raise ValueError(f"Unsupported format: {output_format}")

    posted = False
    if not dry_run:
        if not webhook_url:
            raise ValueError("No webhook: pass --webhook-url or set LEADERBOARD_WEBHOOK_URL")
        client.post_json(webhook_url, webhook_payload(ctx.message, webhook_field))
        posted = True
        log.info("posted %d chars to webhook", len(ctx.message))
    return {
        "content": content,
        "found": ctx.found,
        "records": len(ctx.records),
        "schema": ctx.schema,
        "order": ctx.order,
        "posted": posted,
    }


def main(argv: list[str] | None = None) -> int:  # pragma: no cover
    parser = argparse.ArgumentParser(
        description="Extract a leaderboard table from a web page and post it to a chat webhook"
    )
    parser.add_argument("--url", default=SOURCE_URL, help="Page to read (default from env)")
    parser.add_argument(
        "--html-file", default=None, help="Read a saved HTML snapshot instead of fetching --url"
    )
    parser.add_argument(
        "--schema", default=SCHEMA, choices=sorted(SCHEMAS), help="Output schema (default ranked)"
    )
    parser.add_argument(
        "--order", default=None, choices=ORDERS, help="Override the schema's ordering policy"
    )
    parser.add_argument(
        "--max-rows", type=_positive_int, default=MAX_ROWS, help="Maximum competitors to render"
    )
    parser.add_argument("--title", default=TITLE, help="Title line of the message")
    parser.add_argument("--webhook-url", default=WEBHOOK_URL, help="Chat webhook URL")
    parser.add_argument(
        "--webhook-field",
        default=WEBHOOK_FIELD,
        help="JSON field carrying the message (content for Discord, text for Slack)",
    )
    parser.add_argument(
        "--heuristics", default=HEURISTICS_FILE, help="YAML file overriding keyword/threshold tunables"
    )
    parser.add_argument("--format", default="text", choices=("text", "json"), help="Printed output format")
    parser.add_argument("--dry-run", action="store_true", help="Print the message but do not post it")
    parser.add_argument("--verbose", action="store_true", help="Debug logging to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        summary = generate_daily_report(
            url=args.url,
            html_file=args.html_file,
            schema=args.schema,
            order=args.order,
            max_rows=args.max_rows,
            title=args.title,
            heuristics_file=args.heuristics,
            webhook_url=args.webhook_url,
            webhook_field=args.webhook_field,
            output_format=args.format,
            dry_run=args.dry_run,
        )
    except requests.HTTPError as e:
        print(f"HTTPError: {e}", file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(summary["content"])
    if summary["posted"]:
        print(f"Posted {summary['records']} rows [{summary['schema']}/{summary['order']}]")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

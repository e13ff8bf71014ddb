"""BeautifulSoup-backed document context.

Each ``<iframe>``/``<frame>`` becomes a child context: ``srcdoc`` content is
parsed inline, ``src`` is loaded through the optional ``fetch`` callable.
"""

from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from leaderboard.report.models import RawTable

from .discovery import TableSnapshot

log = logging.getLogger(__name__)

MAX_FRAME_DEPTH = 4

Fetcher = Callable[[str], str]


def _text(node: Tag) -> str:
    return " ".join(node.get_text(" ").split())


def table_rows(table: Tag) -> RawTable:
    rows: RawTable = []
    for tr in table.find_all("tr"):
        cells = [_text(td) for td in tr.find_all(["th", "td"])]
        if cells:
            rows.append(cells)
    return rows


class HtmlDocument:
    def __init__(
        self,
        html: str,
        url: str = "",
        fetch: Fetcher | None = None,
        depth: int = 0,
        max_depth: int = MAX_FRAME_DEPTH,
    ) -> None:
        self.url = url
        self.fetch = fetch
        self.depth = depth
        self.max_depth = max_depth
        self.soup = BeautifulSoup(html or "", "html.parser")
        self._children: list[HtmlDocument] | None = None

    def tables(self) -> list[TableSnapshot]:
        return [
            TableSnapshot(rows=table_rows(t), text=t.get_text(" ").lower())
            for t in self.soup.find_all("table")
        ]

    def _load_frame(self, frame: Tag) -> HtmlDocument | None:
        srcdoc = frame.get("srcdoc")
        if srcdoc:
            return HtmlDocument(srcdoc, self.url, self.fetch, self.depth + 1, self.max_depth)
        src = (frame.get("src") or "").strip()
        if not src or src.startswith(("about:", "javascript:")) or self.fetch is None:
            return None
        target = urljoin(self.url, src)
        try:
            html = self.fetch(target)
        except requests.RequestException as e:
            log.warning("skipping frame %s: %s", target, e)
            return None
        return HtmlDocument(html, target, self.fetch, self.depth + 1, self.max_depth)

    def children(self) -> list[HtmlDocument]:
        if self._children is None:
            self._children = []
            if self.depth < self.max_depth:
                for frame in self.soup.find_all(["iframe", "frame"]):
                    child = self._load_frame(frame)
                    if child is not None:
                        self._children.append(child)
        return self._children

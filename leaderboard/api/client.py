"""HTTP client for fetching the source page and posting to the chat webhook.

- Resilient requests.Session with retries and backoff for transient errors
- GET returns decoded page text; POST sends a JSON body
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_TIMEOUT_SEC = 20
USER_AGENT = "leaderboard-digest/1.0"


class PageClient:
    """Thin wrapper around requests.Session.

    Raises requests.HTTPError on non-2xx responses (after retries). A timeout
    is applied per request to avoid indefinite hangs.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SEC, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        retry = Retry(
            total=5,
            connect=3,
            read=3,
            backoff_factor=0.5,
            status_forcelist=(408, 429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def get_text(self, url: str) -> str:
        r = self.session.get(url, timeout=self.timeout)
        r.raise_for_status()
        return r.text

    def post_json(self, url: str, payload: dict[str, Any]) -> int:
        # POST is outside allowed_methods, so it is sent once.
        r = self.session.post(url, json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.status_code


def webhook_payload(message: str, field: str = "content") -> dict[str, str]:
    """Body for Discord-style (``content``) or Slack-style (``text``) hooks."""
    return {field: message}

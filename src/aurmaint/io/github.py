"""GitHub releases feed client.

Only the `{tag_name, draft, prerelease}` fields of each release are consumed;
everything else in the response is ignored. Transient failures (connection
errors, 429 and 5xx responses) are retried a fixed number of times with a fixed
delay between attempts.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import requests

from aurmaint.core.errors import UpstreamFetchError

log = logging.getLogger(__name__)

_RETRY_STATUS = frozenset({429, 500, 502, 503, 504})


class GitHubReleases:
    """Fetch a releases collection from the GitHub REST API."""

    def __init__(
        self,
        *,
        retries: int = 5,
        retry_delay: float = 7.0,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: tuple[float, float] = (15, 60),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.retries = max(0, int(retries))
        self.retry_delay = max(0.0, float(retry_delay))
        self.timeout = timeout
        self._sleep = sleep

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "aurmaint",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, url: str) -> requests.Response:
        attempts = self.retries + 1
        last: str = ""
        for i in range(1, attempts + 1):
            try:
                r = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                last = str(e)
                log.debug("GET %s failed (attempt %d/%d): %s", url, i, attempts, e)
            else:
                if r.status_code not in _RETRY_STATUS:
                    return r
                last = f"HTTP {r.status_code}"
                log.debug("GET %s returned %d (attempt %d/%d)", url, r.status_code, i, attempts)
            if i < attempts:
                self._sleep(self.retry_delay)
        raise UpstreamFetchError(f"GET {url} failed after {attempts} attempts: {last}")

    def fetch_releases(self, api_url: str) -> list[dict[str, Any]]:
        """Return the releases in feed order.

        Raises:
            UpstreamFetchError: on network failure, non-200 status or a non-array body.
        """
        r = self._get(api_url)
        if r.status_code != 200:
            raise UpstreamFetchError(f"GET {api_url} failed {r.status_code}: {r.text[:400]}")
        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamFetchError(f"GET {api_url}: response is not JSON") from e
        if not isinstance(data, list):
            raise UpstreamFetchError(f"GET {api_url}: expected JSON array, got {type(data).__name__}")
        return [item for item in data if isinstance(item, dict)]

"""HTTP fetcher for FIS pages and feeds."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from fidswatch.scrape.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124 Safari/537.36"
)
# Sent to both the HTML pages and the XML feeds.
DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xml;q=0.9,*/*;q=0.8",
}


@dataclass
class FetchResponse:
    """Raw document plus the response metadata needed for conditional fetches."""

    url: str
    text: str
    status_code: int
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    not_modified: bool = False


class Fetcher:
    """Retrieve raw markup from one URL at a time. No retries."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, headers: Optional[Dict[str, str]] = None):
        if timeout is None or timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.timeout = timeout
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}

    def fetch(
        self,
        url: str,
        etag: Optional[str] = None,
        last_modified: Optional[str] = None,
    ) -> FetchResponse:
        """GET url; raises FetchError on timeout, network failure or error status."""
        headers = dict(self.headers)
        if etag:
            headers["If-None-Match"] = etag
        if last_modified:
            headers["If-Modified-Since"] = last_modified

        try:
            resp = requests.get(url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise FetchError(url, f"timed out after {self.timeout}s") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(url, f"HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        logger.debug("GET %s -> %s", url, resp.status_code)
        if resp.status_code == 304:
            return FetchResponse(
                url=url,
                text="",
                status_code=304,
                etag=resp.headers.get("ETag") or etag,
                last_modified=resp.headers.get("Last-Modified") or last_modified,
                not_modified=True,
            )

        return FetchResponse(
            url=url,
            text=resp.text,
            status_code=resp.status_code,
            etag=resp.headers.get("ETag"),
            last_modified=resp.headers.get("Last-Modified"),
        )

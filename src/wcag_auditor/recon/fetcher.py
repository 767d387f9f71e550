"""HTTP fetching for the crawler."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import requests

from ..core.errors import FetchError
from .link_collector import extract_title

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass(frozen=True)
class FetchedPage:
    url: str
    status_code: int
    text: str
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        if not self.content_type:
            return True
        lowered = self.content_type.lower()
        return any(kind in lowered for kind in HTML_CONTENT_TYPES)


def _prepare_session(user_agent: Optional[str]) -> requests.Session:
    session = requests.Session()
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session


class PageFetcher:
    """Downloads pages with a bounded timeout."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or _prepare_session(user_agent)

    def fetch(self, url: str) -> FetchedPage:
        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.Timeout as exc:
            raise FetchError(url, f"timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise FetchError(url, str(exc)) from exc

        if not response.ok:
            raise FetchError(url, f"HTTP {response.status_code}")

        return FetchedPage(
            url=response.url or url,
            status_code=response.status_code,
            text=response.text,
            content_type=response.headers.get("Content-Type", ""),
        )

    def close(self) -> None:
        self.session.close()


class PageTitleLookup:
    """Resolves a page's ``<title>``, preferring titles already seen while crawling."""

    def __init__(
        self,
        known: Optional[Mapping[str, str]] = None,
        fetcher: Optional[PageFetcher] = None,
    ) -> None:
        self._titles: Dict[str, Optional[str]] = dict(known or {})
        self.fetcher = fetcher

    def __call__(self, url: str) -> Optional[str]:
        if url in self._titles:
            return self._titles[url]
        if self.fetcher is None:
            return None

        title: Optional[str] = None
        try:
            page = self.fetcher.fetch(url)
        except FetchError as exc:
            logger.debug("No title for %s: %s", url, exc.reason)
        else:
            if page.is_html:
                title = extract_title(page.text)
        self._titles[url] = title
        return title

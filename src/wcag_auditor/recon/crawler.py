"""Breadth-first, domain-bounded crawler that feeds the audit stage."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from ..core.config import DEFAULT_REPORT_NAME, AuditorConfig, validate_seed_url
from ..core.errors import ConfigurationError, FetchError
from ..core.report import CrawlReport
from .fetcher import FetchedPage, PageFetcher
from .link_collector import parse_page
from .state import CrawlState
from .targeting import DomainFilter

logger = logging.getLogger(__name__)

FetchOutcome = Tuple[List[str], Optional[str], Optional[str]]


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchedPage: ...


@dataclass
class Spider:
    """Collects same-origin page URLs starting from the configured seed."""

    config: AuditorConfig
    fetcher: Optional[Fetcher] = None
    report: CrawlReport = field(default_factory=CrawlReport)

    def __post_init__(self) -> None:
        self._target_filter = DomainFilter.from_seed(self.config.seed_url)
        self._owns_fetcher = self.fetcher is None
        if self.fetcher is None:
            self.fetcher = PageFetcher(
                timeout=self.config.fetch_timeout,
                user_agent=self.config.user_agent,
            )
        self._state = CrawlState(base_domain=self._target_filter.base_domain)

    @property
    def runtime_state(self) -> CrawlState:
        """Return the current mutable runtime state for observability tools."""

        return self._state

    # ------------------------------------------------------------------
    # Core workflow
    # ------------------------------------------------------------------
    def run(self) -> CrawlReport:
        self._reset_runtime_state()
        self._state.enqueue(self.config.seed_url, 0)

        try:
            with ThreadPoolExecutor(max_workers=self.config.fetch_workers) as executor:
                while self._state.pending:
                    depth = self._state.pending[0][1]
                    batch = self._select_level(depth)
                    if not batch or not self._should_expand(depth):
                        continue

                    # map() keeps input order, so merging stays deterministic
                    # whatever the number of workers.
                    outcomes = executor.map(self._fetch_links, batch)
                    for url, outcome in zip(batch, outcomes):
                        self._merge_links(url, outcome, depth + 1)
        finally:
            if self._owns_fetcher and isinstance(self.fetcher, PageFetcher):
                self.fetcher.close()

        self.report.discovered_urls = list(self._state.discovered)
        logger.info(
            "Crawl finished: %d page(s) selected, %d fetch failure(s)",
            len(self.report.discovered_urls),
            len(self.report.fetch_failures),
        )
        return self.report

    # ------------------------------------------------------------------
    # Runtime setup helpers
    # ------------------------------------------------------------------
    def _reset_runtime_state(self) -> None:
        self._state = CrawlState(base_domain=self._target_filter.base_domain)
        self.report.seed_url = self.config.seed_url
        self.report.base_domain = self._target_filter.base_domain
        self.report.discovered_urls = []
        self.report.fetch_failures = {}
        self.report.external_urls = set()
        self.report.page_titles = {}

    # ------------------------------------------------------------------
    # Crawling primitives
    # ------------------------------------------------------------------
    def _select_level(self, depth: int) -> List[str]:
        batch: List[str] = []
        pending = self._state.pending
        while pending and pending[0][1] == depth:
            url, _ = pending.popleft()
            if len(self._state.discovered) >= self.config.max_pages:
                continue
            logger.info("Crawling (depth %d): %s", depth, url)
            self._state.discovered.append(url)
            batch.append(url)
        return batch

    def _should_expand(self, depth: int) -> bool:
        # Links found at max depth, or once the cap is hit, could never be selected.
        if depth >= self.config.max_depth:
            return False
        return len(self._state.discovered) < self.config.max_pages

    def _fetch_links(self, url: str) -> FetchOutcome:
        try:
            page = self.fetcher.fetch(url)
        except FetchError as exc:
            logger.warning("Fetch failed for %s: %s", url, exc.reason)
            return [], exc.reason, None
        except Exception as exc:  # noqa: BLE001 - one broken fetch only ends this branch
            logger.warning("Unexpected error fetching %s: %s", url, exc)
            return [], f"{type(exc).__name__}: {exc}", None

        if not page.is_html:
            logger.debug("Not following links of non-HTML page %s (%s)", url, page.content_type)
            return [], None, None

        # Resolve against the requested URL so links survive an http->https
        # or apex->www redirect on the way to the final page.
        try:
            links, title = parse_page(page.text, url)
        except Exception as exc:  # noqa: BLE001 - broken markup only ends this branch
            logger.warning("Could not parse %s: %s", url, exc)
            return [], f"parse error: {exc}", None
        return links, None, title

    def _merge_links(self, page_url: str, outcome: FetchOutcome, depth: int) -> None:
        links, error, title = outcome
        if error is not None:
            self.report.fetch_failures[page_url] = error
            return
        if title:
            self.report.page_titles[page_url] = title

        if depth > self.config.max_depth:
            return

        for link in links:
            if not self._target_filter.is_allowed(link):
                if link not in self.report.external_urls:
                    logger.debug("Skipped (external link): %s", link)
                    self.report.external_urls.add(link)
                continue
            if self._state.is_seen(link):
                continue
            if not self._state.has_room(self.config.max_pages):
                continue
            self._state.enqueue(link, depth)


def crawl(
    seed_url: str,
    max_depth: int,
    max_pages: int,
    *,
    fetcher: Optional[Fetcher] = None,
    workers: int = 1,
    fetch_timeout: float = 10.0,
) -> List[str]:
    """Returns the ordered, deduplicated same-origin URLs reachable from ``seed_url``."""

    if max_depth < 0:
        raise ConfigurationError("max depth must be zero or greater")
    if max_pages <= 0:
        raise ConfigurationError("max pages must be greater than zero")
    if workers < 1:
        raise ConfigurationError("fetch workers must be at least 1")

    config = AuditorConfig(
        seed_url=validate_seed_url(seed_url),
        report_path=Path(DEFAULT_REPORT_NAME),
        max_depth=max_depth,
        max_pages=max_pages,
        fetch_timeout=fetch_timeout,
        fetch_workers=workers,
    )
    return Spider(config, fetcher=fetcher).run().discovered_urls

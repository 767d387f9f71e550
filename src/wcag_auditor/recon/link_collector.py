"""Anchor extraction, title extraction and href normalization."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

from .targeting import ALLOWED_SCHEMES

logger = logging.getLogger(__name__)


def _hrefs_from_soup(soup: BeautifulSoup) -> List[str]:
    hrefs: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if isinstance(href, str):
            hrefs.append(href)
    return hrefs


def _title_from_soup(soup: BeautifulSoup) -> Optional[str]:
    if soup.title is None:
        return None
    title = " ".join(soup.title.get_text().split())
    return title or None


def extract_links(html: str) -> List[str]:
    """Returns the raw ``href`` values of every anchor, in document order."""

    if not html:
        return []
    return _hrefs_from_soup(BeautifulSoup(html, "html.parser"))


def extract_title(html: str) -> Optional[str]:
    """Whitespace-collapsed ``<title>`` text, or ``None`` when absent or empty."""

    if not html:
        return None
    return _title_from_soup(BeautifulSoup(html, "html.parser"))


def normalize_link(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolves ``href`` against ``base_url``.

    Returns an absolute http(s) URL without fragment, or ``None`` for empty,
    non-web (``mailto:``, ``javascript:``) and malformed values.
    """

    if not href:
        return None
    candidate = href.strip()
    if not candidate or candidate.startswith("#"):
        return None

    try:
        joined = urljoin(base_url, candidate)
        parsed = urlparse(joined)
        parsed.port  # noqa: B018 - raises ValueError on an invalid port
    except ValueError:
        logger.debug("Ignoring malformed href %r on %s", href, base_url)
        return None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname:
        return None

    return urlunparse(parsed._replace(fragment=""))


def _normalize_all(hrefs: List[str], base_url: str) -> List[str]:
    links: List[str] = []
    for href in hrefs:
        normalized = normalize_link(base_url, href)
        if normalized:
            links.append(normalized)
    return links


def parse_page(html: str, base_url: str) -> Tuple[List[str], Optional[str]]:
    """Normalized links and title of a page from a single parse."""

    if not html:
        return [], None
    soup = BeautifulSoup(html, "html.parser")
    return _normalize_all(_hrefs_from_soup(soup), base_url), _title_from_soup(soup)

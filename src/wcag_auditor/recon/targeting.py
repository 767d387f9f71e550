from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse, urlunparse

from ..core.errors import ConfigurationError

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> Optional[str]:
    """Returns ``scheme://host[:port]`` for an http(s) URL, ``None`` otherwise.

    Default ports are dropped so ``https://example.com:443`` and
    ``https://example.com`` share an origin.
    """

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES or not hostname:
        return None

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def canonical_key(url: str) -> str:
    """Key used for visit deduplication."""

    origin = origin_of(url)
    parsed = urlparse(url)
    if origin is None:
        return urlunparse(parsed._replace(fragment=""))
    path = parsed.path or "/"
    return f"{origin}{urlunparse(('', '', path, parsed.params, parsed.query, ''))}"


@dataclass(frozen=True, slots=True)
class DomainFilter:
    """Keeps the crawl on the seed's origin."""

    base_domain: str

    @classmethod
    def from_seed(cls, seed_url: str) -> "DomainFilter":
        base = origin_of(seed_url)
        if base is None:
            raise ConfigurationError(f"Cannot derive a base domain from seed URL {seed_url!r}")
        return cls(base_domain=base)

    def is_allowed(self, url: str) -> bool:
        return origin_of(url) == self.base_domain

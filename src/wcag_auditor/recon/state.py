from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from .targeting import canonical_key


@dataclass(slots=True)
class CrawlState:
    """Mutable bookkeeping for a single crawl run."""

    base_domain: str
    visited: set[str] = field(default_factory=set)
    discovered: list[str] = field(default_factory=list)
    pending: deque[tuple[str, int]] = field(default_factory=deque)

    def has_room(self, max_pages: int) -> bool:
        return len(self.discovered) + len(self.pending) < max_pages

    def enqueue(self, url: str, depth: int) -> bool:
        """Queues ``url`` unless it was already queued or selected."""

        key = canonical_key(url)
        if key in self.visited:
            return False
        self.visited.add(key)
        self.pending.append((url, depth))
        return True

    def is_seen(self, url: str) -> bool:
        return canonical_key(url) in self.visited

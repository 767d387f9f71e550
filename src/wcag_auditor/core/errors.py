"""Exception types shared by the crawl, audit and export stages."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when the run configuration is missing or invalid."""


class FetchError(RuntimeError):
    """Raised when a page cannot be downloaded during the crawl."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class AuditError(RuntimeError):
    """Raised by an audit engine when a page could not be audited."""


class ExportError(RuntimeError):
    """Raised when the issue table cannot be written."""

"""Configuration loading and validation utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigurationError

SUPPORTED_STANDARDS = ("WCAG2A", "WCAG2AA", "WCAG2AAA")
SUPPORTED_ENGINES = ("pa11y", "axe")
SUPPORTED_EXPORT_SUFFIXES = (".xlsx", ".csv")

DEFAULT_REPORT_NAME = "wcag_crawl_results.xlsx"
DEFAULT_USER_AGENT = "wcag-crawl-auditor/0.1 (+https://www.w3.org/WAI/)"
DEFAULT_AXE_SCRIPT_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class AuditOptions:
    """Options bundle handed to the audit engine for every page."""

    standard: str = "WCAG2AA"
    wait_ms: int = 5000
    include_warnings: bool = True
    include_notices: bool = True
    runners: Tuple[str, ...] = ("htmlcs",)
    timeout_ms: int = 60000


@dataclass(frozen=True, slots=True)
class AuditorConfig:
    """Holds the read-only options for a full crawl and audit run."""

    seed_url: str
    report_path: Path
    max_depth: int = 2
    max_pages: int = 100
    audit_options: AuditOptions = field(default_factory=AuditOptions)
    engine: str = "pa11y"
    fetch_timeout: float = 10.0
    fetch_workers: int = 1
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    axe_script_url: str = DEFAULT_AXE_SCRIPT_URL
    crawl_report_path: Optional[Path] = None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _pick(value, fallback):
    return fallback if value is None else value


def validate_seed_url(seed_url: Optional[str]) -> str:
    """Returns the stripped seed URL or raises ``ConfigurationError``."""

    candidate = (seed_url or "").strip()
    if not candidate:
        raise ConfigurationError("A seed URL is required")
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
        parsed.port  # noqa: B018 - raises ValueError on an invalid port
    except ValueError as exc:
        raise ConfigurationError(f"Invalid seed URL {candidate!r}: {exc}") from exc

    if parsed.scheme.lower() not in {"http", "https"} or not hostname:
        raise ConfigurationError(
            f"Invalid seed URL {candidate!r}: expected an absolute http(s) address"
        )
    return candidate


def load_configuration(
    seed_url: str,
    report_name: Optional[str] = None,
    *,
    max_depth: Optional[int] = None,
    max_pages: Optional[int] = None,
    standard: Optional[str] = None,
    wait_ms: Optional[int] = None,
    include_warnings: Optional[bool] = None,
    include_notices: Optional[bool] = None,
    engine: Optional[str] = None,
    fetch_timeout: Optional[float] = None,
    fetch_workers: Optional[int] = None,
    crawl_report: Optional[str] = None,
) -> AuditorConfig:
    """Builds an ``AuditorConfig`` from CLI input and environment variables.

    Explicit arguments win over environment variables, which win over the
    built-in defaults. Every value is validated here so that an invalid
    configuration fails before any network activity.
    """

    load_dotenv()  # Loads .env values if present

    seed = validate_seed_url(seed_url)

    report_path = Path(report_name or os.getenv("REPORT_PATH") or DEFAULT_REPORT_NAME).resolve()
    if report_path.suffix.lower() not in SUPPORTED_EXPORT_SUFFIXES:
        raise ConfigurationError(
            f"Unsupported output format {report_path.suffix!r}; "
            f"use one of {', '.join(SUPPORTED_EXPORT_SUFFIXES)}"
        )

    depth = _pick(max_depth, _env_int("MAX_CRAWL_DEPTH", 2))
    if depth < 0:
        raise ConfigurationError("max depth must be zero or greater")

    pages = _pick(max_pages, _env_int("MAX_PAGES", 100))
    if pages <= 0:
        raise ConfigurationError("max pages must be greater than zero")

    standard_value = _pick(standard, os.getenv("AUDIT_STANDARD", "WCAG2AA")).upper()
    if standard_value not in SUPPORTED_STANDARDS:
        raise ConfigurationError(
            f"Unknown standard {standard_value!r}; use one of {', '.join(SUPPORTED_STANDARDS)}"
        )

    wait_value = _pick(wait_ms, _env_int("AUDIT_WAIT_MS", 5000))
    if wait_value < 0:
        raise ConfigurationError("audit wait must be zero or greater")

    timeout_ms = _env_int("AUDIT_TIMEOUT_MS", 60000)
    if timeout_ms <= 0:
        raise ConfigurationError("AUDIT_TIMEOUT_MS must be greater than zero")

    runners = tuple(
        runner.strip()
        for runner in os.getenv("PA11Y_RUNNERS", "htmlcs").split(",")
        if runner.strip()
    ) or ("htmlcs",)

    engine_value = _pick(engine, os.getenv("AUDIT_ENGINE", "pa11y")).lower()
    if engine_value not in SUPPORTED_ENGINES:
        raise ConfigurationError(
            f"Unknown audit engine {engine_value!r}; use one of {', '.join(SUPPORTED_ENGINES)}"
        )

    timeout_value = _pick(fetch_timeout, _env_float("FETCH_TIMEOUT", 10.0))
    if timeout_value <= 0:
        raise ConfigurationError("fetch timeout must be greater than zero")

    workers = _pick(fetch_workers, _env_int("FETCH_WORKERS", 1))
    if workers < 1:
        raise ConfigurationError("fetch workers must be at least 1")

    options = AuditOptions(
        standard=standard_value,
        wait_ms=wait_value,
        include_warnings=_pick(include_warnings, _env_bool("INCLUDE_WARNINGS", True)),
        include_notices=_pick(include_notices, _env_bool("INCLUDE_NOTICES", True)),
        runners=runners,
        timeout_ms=timeout_ms,
    )

    crawl_report_path = Path(crawl_report).resolve() if crawl_report else None

    return AuditorConfig(
        seed_url=seed,
        report_path=report_path,
        max_depth=depth,
        max_pages=pages,
        audit_options=options,
        engine=engine_value,
        fetch_timeout=timeout_value,
        fetch_workers=workers,
        user_agent=os.getenv("CRAWLER_USER_AGENT") or DEFAULT_USER_AGENT,
        headless=_env_bool("HEADLESS", True),
        axe_script_url=os.getenv("AXE_SCRIPT_URL") or DEFAULT_AXE_SCRIPT_URL,
        crawl_report_path=crawl_report_path,
    )

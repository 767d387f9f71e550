"""Command line interface for the WCAG crawl auditor."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .audit.orchestrator import Auditor, run_audits
from .core.config import SUPPORTED_ENGINES, SUPPORTED_STANDARDS, AuditorConfig, load_configuration
from .core.dependencies import verify_dependencies
from .core.errors import ConfigurationError, ExportError
from .core.export import export_records
from .core.logs import configure_logging
from .core.report import CrawlReport
from .recon.crawler import Spider
from .recon.fetcher import PageFetcher, PageTitleLookup
from .scanners.axe import AxeAuditor
from .scanners.pa11y import Pa11yAuditor

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a website and export its WCAG accessibility issues"
    )
    parser.add_argument("-u", "--url", required=True, help="Seed URL of the site to crawl")
    parser.add_argument("-o", "--output", default=None, help="Output file (.xlsx or .csv)")
    parser.add_argument("-d", "--max-depth", type=int, default=None, help="Maximum link depth from the seed")
    parser.add_argument("-p", "--max-pages", type=int, default=None, help="Maximum number of pages to audit")
    parser.add_argument("--standard", choices=SUPPORTED_STANDARDS, default=None, help="Accessibility standard")
    parser.add_argument("--wait", type=int, default=None, help="Milliseconds to wait before auditing a page")
    parser.add_argument(
        "--include-warnings",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report warnings (default from .env/environment, otherwise on)",
    )
    parser.add_argument(
        "--include-notices",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report notices (default from .env/environment, otherwise on)",
    )
    parser.add_argument("--engine", choices=SUPPORTED_ENGINES, default=None, help="Audit engine")
    parser.add_argument("--workers", type=int, default=None, help="Concurrent page fetches while crawling")
    parser.add_argument("--fetch-timeout", type=float, default=None, help="Per-page fetch timeout in seconds")
    parser.add_argument("--crawl-report", default=None, help="Also save the crawl result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_auditor(config: AuditorConfig, report: Optional[CrawlReport] = None) -> Auditor:
    if config.engine == "axe":
        return AxeAuditor(headless=config.headless, script_url=config.axe_script_url)
    titles = PageTitleLookup(
        report.page_titles if report else None,
        PageFetcher(timeout=config.fetch_timeout, user_agent=config.user_agent),
    )
    return Pa11yAuditor(title_lookup=titles)


def print_dependency_status(engine: str) -> bool:
    status = verify_dependencies(engine)
    missing = [name for name, ok in status.items() if not ok]
    for name, ok in status.items():
        print(f"[{'+' if ok else '!'}] {name} {'found' if ok else 'not found'}")
    if missing:
        print("[!] Install the tools above before continuing.")
        return False
    return True


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.verbose)

    try:
        config = load_configuration(
            args.url,
            args.output,
            max_depth=args.max_depth,
            max_pages=args.max_pages,
            standard=args.standard,
            wait_ms=args.wait,
            include_warnings=args.include_warnings,
            include_notices=args.include_notices,
            engine=args.engine,
            fetch_timeout=args.fetch_timeout,
            fetch_workers=args.workers,
            crawl_report=args.crawl_report,
        )
    except ConfigurationError as exc:
        print(f"[!] Invalid configuration: {exc}")
        return EXIT_CONFIGURATION

    print("[*] Checking dependencies...")
    if not print_dependency_status(config.engine):
        return EXIT_FAILURE

    print(f"\n=== [1/3] Crawl (depth {config.max_depth}, up to {config.max_pages} pages) ===")
    report = Spider(config).run()
    print(f"[+] {len(report.discovered_urls)} page(s) selected for auditing")
    if report.fetch_failures:
        print(f"[!] {len(report.fetch_failures)} page(s) could not be fetched")
    if config.crawl_report_path:
        report.save(config.crawl_report_path)
        print(f"[+] Crawl report saved to {config.crawl_report_path}")

    print(f"\n=== [2/3] Accessibility audit ({config.engine}, {config.audit_options.standard}) ===")
    artifact = run_audits(report.discovered_urls, build_auditor(config, report), config.audit_options)
    if artifact.has_records:
        for issue_type, count in sorted(artifact.issue_counts.items()):
            print(f" - {issue_type}: {count}")
    else:
        print(" - No accessibility issues found.")

    print("\n=== [3/3] Export ===")
    try:
        written = export_records(artifact.records, config.report_path)
    except ExportError as exc:
        print(f"[!] {exc}")
        return EXIT_FAILURE

    if written is None:
        print(" - Nothing to export.")
    else:
        print(f"[+] Results saved to {written}")
    return EXIT_OK


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()

"""Helper script to execute the crawler in isolation.

Runs the domain-bounded crawl against a single seed URL without auditing
anything, and saves the resulting crawl report as JSON. Useful to check
which pages a full run would audit.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Guarantee imports resolve to the local source tree when running from a checkout.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    src_str = str(SRC_PATH)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from wcag_auditor.core.config import load_configuration
from wcag_auditor.core.errors import ConfigurationError
from wcag_auditor.core.logs import configure_logging
from wcag_auditor.recon.crawler import Spider


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run only the crawler against a seed URL")
    parser.add_argument("url", help="Seed URL of the site to crawl")
    parser.add_argument(
        "--report",
        default="crawl_report.json",
        help="Output file for the crawl report (JSON). Default: crawl_report.json",
    )
    parser.add_argument("-d", "--max-depth", type=int, default=None)
    parser.add_argument("-p", "--max-pages", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def main() -> int:
    args = parse_arguments()
    configure_logging(args.verbose)

    try:
        config = load_configuration(
            args.url,
            max_depth=args.max_depth,
            max_pages=args.max_pages,
            fetch_workers=args.workers,
            crawl_report=args.report,
        )
    except ConfigurationError as exc:
        print(f"[!] Invalid configuration: {exc}")
        return 2

    spider = Spider(config)

    print(f"[*] Crawling {config.seed_url} (depth {config.max_depth}, up to {config.max_pages} pages)")
    try:
        report = spider.run()
    except KeyboardInterrupt:
        print("[!] Interrupted by user")
        return 130

    report.save(config.crawl_report_path)
    print(f"[+] Report saved to {config.crawl_report_path}")
    print(f"    Pages selected     : {len(report.discovered_urls)}")
    print(f"    Fetch failures     : {len(report.fetch_failures)}")
    print(f"    External links     : {len(report.external_urls)}")
    print(f"    URLs seen (queued) : {len(spider.runtime_state.visited)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Accessibility audits with axe-core driven through Playwright."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ...core.config import DEFAULT_AXE_SCRIPT_URL, AuditOptions
from ...core.errors import AuditError
from ...core.report import AuditIssue, AuditResult

logger = logging.getLogger(__name__)

RUNNER_NAME = "axe"
AXE_RUN_SCRIPT = "options => window.axe.run(document, options)"

STANDARD_TAGS: Dict[str, Tuple[str, ...]] = {
    "WCAG2A": ("wcag2a", "wcag21a"),
    "WCAG2AA": ("wcag2a", "wcag21a", "wcag2aa", "wcag21aa", "wcag22aa"),
    "WCAG2AAA": ("wcag2a", "wcag21a", "wcag2aa", "wcag21aa", "wcag22aa", "wcag2aaa"),
}


def build_run_options(options: AuditOptions) -> Dict[str, Any]:
    result_types = ["violations"]
    if options.include_warnings:
        result_types.append("incomplete")
    return {
        "runOnly": {"type": "tag", "values": list(STANDARD_TAGS[options.standard])},
        "resultTypes": result_types,
    }


def _format_target(target: Any) -> str:
    if isinstance(target, list):
        return " ".join(_format_target(part) for part in target)
    return str(target)


def _issues_for(rules: Iterable[Mapping[str, Any]], issue_type: str) -> List[AuditIssue]:
    issues: List[AuditIssue] = []
    for rule in rules:
        for node in rule.get("nodes") or []:
            targets = node.get("target") or []
            issues.append(
                AuditIssue(
                    type=issue_type,
                    code=str(rule.get("id", "")),
                    message=str(rule.get("help") or rule.get("description") or ""),
                    context=node.get("html"),
                    selector=", ".join(_format_target(target) for target in targets) or None,
                    runner=RUNNER_NAME,
                    runner_extras={
                        "impact": node.get("impact") or rule.get("impact"),
                        "helpUrl": rule.get("helpUrl"),
                        "tags": list(rule.get("tags") or []),
                        "failureSummary": node.get("failureSummary"),
                    },
                )
            )
    return issues


def issues_from_axe_results(results: Mapping[str, Any], options: AuditOptions) -> Tuple[AuditIssue, ...]:
    """Violations become errors; incomplete checks become warnings when requested."""

    issues = _issues_for(results.get("violations") or [], "error")
    if options.include_warnings:
        issues.extend(_issues_for(results.get("incomplete") or [], "warning"))
    return tuple(issues)


class AxeAuditor:
    """Audits a page in headless Chromium with an injected axe-core script.

    A fresh browser is launched for every page and closed afterwards, so no
    state leaks from one audited page to the next.
    """

    engine_name = RUNNER_NAME

    def __init__(self, *, headless: bool = True, script_url: str = DEFAULT_AXE_SCRIPT_URL) -> None:
        self.headless = headless
        self.script_url = script_url

    def _script_tag_args(self) -> Dict[str, str]:
        path = Path(self.script_url)
        if "://" not in self.script_url and path.exists():
            return {"path": str(path)}
        return {"url": self.script_url}

    def audit(self, url: str, options: AuditOptions) -> AuditResult:
        with sync_playwright() as playwright:
            browser = None
            try:
                browser = playwright.chromium.launch(headless=self.headless)
                page = browser.new_page()
                page.goto(url, timeout=options.timeout_ms, wait_until="load")
                if options.wait_ms:
                    page.wait_for_timeout(options.wait_ms)
                page.add_script_tag(**self._script_tag_args())
                results = page.evaluate(AXE_RUN_SCRIPT, build_run_options(options))
                document_title = page.title()
            except PlaywrightError as exc:
                raise AuditError(f"axe audit failed: {exc}") from exc
            finally:
                if browser is not None:
                    browser.close()

        if not isinstance(results, dict):
            raise AuditError("axe returned an unexpected result")

        issues = issues_from_axe_results(results, options)
        logger.debug("axe reported %d issue(s) for %s", len(issues), url)
        return AuditResult(url=url, document_title=document_title or None, issues=issues)

"""Sequential audit of the crawled pages."""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from ..core.config import AuditOptions
from ..core.report import AuditIssueRecord, AuditResult, AuditRunArtifact

logger = logging.getLogger(__name__)


class Auditor(Protocol):
    def audit(self, url: str, options: AuditOptions) -> AuditResult: ...


def run_audits(
    urls: Sequence[str],
    auditor: Auditor,
    options: AuditOptions,
) -> AuditRunArtifact:
    """Audits each URL in order and flattens the findings into records.

    A failing page produces a single ``audit-failure`` record and the loop
    moves on to the next URL.
    """

    records: List[AuditIssueRecord] = []
    total = len(urls)

    for index, url in enumerate(urls, start=1):
        logger.info("[%d/%d] Auditing %s", index, total, url)
        try:
            result = auditor.audit(url, options)
        except Exception as exc:  # noqa: BLE001 - any engine failure is per page
            logger.error("Audit failed for %s: %s", url, exc)
            records.append(AuditIssueRecord.failure(url, str(exc) or type(exc).__name__))
            continue

        if result.issues:
            logger.info("  %d issue(s) found on %s", len(result.issues), url)
        else:
            logger.info("  No issues found on %s", url)

        records.extend(
            AuditIssueRecord.from_issue(url, result.document_title, issue) for issue in result.issues
        )

    return AuditRunArtifact(audited_urls=tuple(urls), records=records)

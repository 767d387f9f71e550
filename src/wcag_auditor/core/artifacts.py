"""Shared artifact data structures for the crawl, audit and export stages."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

NOT_APPLICABLE = "N/A"
AUDIT_FAILURE = "audit-failure"

EXPORT_COLUMNS: Tuple[str, ...] = (
    "Tested URL",
    "Document Title",
    "Issue Type",
    "WCAG Code",
    "Message",
    "Context",
    "Selector",
    "Runner",
    "Runner Extras",
)


@dataclass
class CrawlReport:
    """Structured data produced by the crawler."""

    seed_url: str = ""
    base_domain: str = ""
    discovered_urls: List[str] = field(default_factory=list)
    fetch_failures: Dict[str, str] = field(default_factory=dict)
    external_urls: Set[str] = field(default_factory=set)
    page_titles: Dict[str, str] = field(default_factory=dict)

    def to_json(self) -> str:
        data = {
            "seed_url": self.seed_url,
            "base_domain": self.base_domain,
            "discovered_urls": list(self.discovered_urls),
            "fetch_failures": dict(sorted(self.fetch_failures.items())),
            "external_urls": sorted(self.external_urls),
            "page_titles": dict(self.page_titles),
        }
        return json.dumps(data, indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "CrawlReport":
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            seed_url=raw.get("seed_url", ""),
            base_domain=raw.get("base_domain", ""),
            discovered_urls=list(raw.get("discovered_urls", [])),
            fetch_failures=dict(raw.get("fetch_failures", {})),
            external_urls=set(raw.get("external_urls", [])),
            page_titles=dict(raw.get("page_titles", {})),
        )


@dataclass(frozen=True)
class AuditIssue:
    """A single finding reported by an audit engine."""

    type: str
    code: str
    message: str
    context: Optional[str] = None
    selector: Optional[str] = None
    runner: str = ""
    runner_extras: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default_runner: str = "") -> "AuditIssue":
        return cls(
            type=str(data.get("type") or NOT_APPLICABLE),
            code=str(data.get("code") or NOT_APPLICABLE),
            message=str(data.get("message") or ""),
            context=data.get("context"),
            selector=data.get("selector"),
            runner=str(data.get("runner") or default_runner),
            runner_extras=data.get("runnerExtras"),
        )


@dataclass(frozen=True)
class AuditResult:
    """Outcome of auditing one page."""

    url: str
    document_title: Optional[str]
    issues: Tuple[AuditIssue, ...] = ()


def _serialize_extras(extras: Any) -> str:
    if extras is None:
        return ""
    return json.dumps(extras, ensure_ascii=False, sort_keys=True, default=str)


@dataclass(frozen=True)
class AuditIssueRecord:
    """Flat row describing one issue (or one failed audit) for export."""

    tested_url: str
    document_title: str
    issue_type: str
    code: str
    message: str
    context: str
    selector: str
    runner: str
    runner_extras: str

    @classmethod
    def from_issue(cls, url: str, document_title: Optional[str], issue: AuditIssue) -> "AuditIssueRecord":
        return cls(
            tested_url=url,
            document_title=document_title or NOT_APPLICABLE,
            issue_type=issue.type,
            code=issue.code,
            message=issue.message,
            context=issue.context or "",
            selector=issue.selector or "",
            runner=issue.runner,
            runner_extras=_serialize_extras(issue.runner_extras),
        )

    @classmethod
    def failure(cls, url: str, reason: str) -> "AuditIssueRecord":
        return cls(
            tested_url=url,
            document_title=NOT_APPLICABLE,
            issue_type=AUDIT_FAILURE,
            code=NOT_APPLICABLE,
            message=f"Unable to audit page: {reason}",
            context=NOT_APPLICABLE,
            selector=NOT_APPLICABLE,
            runner=NOT_APPLICABLE,
            runner_extras=NOT_APPLICABLE,
        )

    def as_row(self) -> Dict[str, str]:
        values = (
            self.tested_url,
            self.document_title,
            self.issue_type,
            self.code,
            self.message,
            self.context,
            self.selector,
            self.runner,
            self.runner_extras,
        )
        return dict(zip(EXPORT_COLUMNS, values))


@dataclass
class AuditRunArtifact:
    """Container returned by the audit orchestrator."""

    audited_urls: Tuple[str, ...]
    records: List[AuditIssueRecord]

    @property
    def failed_urls(self) -> Tuple[str, ...]:
        return tuple(
            record.tested_url for record in self.records if record.issue_type == AUDIT_FAILURE
        )

    @property
    def issue_counts(self) -> Dict[str, int]:
        return dict(Counter(record.issue_type for record in self.records))

    @property
    def has_records(self) -> bool:
        return bool(self.records)

"""Backwards-compatible exports for artifact data structures."""

from __future__ import annotations

from .artifacts import (
    AUDIT_FAILURE,
    EXPORT_COLUMNS,
    NOT_APPLICABLE,
    AuditIssue,
    AuditIssueRecord,
    AuditResult,
    AuditRunArtifact,
    CrawlReport,
)

__all__ = [
    "AUDIT_FAILURE",
    "EXPORT_COLUMNS",
    "NOT_APPLICABLE",
    "AuditIssue",
    "AuditIssueRecord",
    "AuditResult",
    "AuditRunArtifact",
    "CrawlReport",
]

"""Wrapper around the external ``pa11y`` tool."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ...core.config import AuditOptions
from ...core.errors import AuditError
from ...core.report import AuditIssue, AuditResult

logger = logging.getLogger(__name__)

# pa11y exits with 2 when the page was audited and issues were found.
SUCCESS_RETURN_CODES = frozenset({0, 2})
PROCESS_GRACE_SECONDS = 30


def _trim_output(output: str, limit: int = 2000) -> str:
    if len(output) <= limit:
        return output
    return f"{output[:limit]}\n...[truncated]..."


def build_command(executable: str, url: str, options: AuditOptions) -> Tuple[str, ...]:
    command: List[str] = [
        executable,
        "--reporter",
        "json",
        "--standard",
        options.standard,
        "--wait",
        str(options.wait_ms),
        "--timeout",
        str(options.timeout_ms),
    ]
    if options.include_warnings:
        command.append("--include-warnings")
    if options.include_notices:
        command.append("--include-notices")
    for runner in options.runners:
        command.extend(["--runner", runner])
    command.append(url)
    return tuple(command)


def _process_timeout(options: AuditOptions) -> float:
    return (options.timeout_ms + options.wait_ms) / 1000 + PROCESS_GRACE_SECONDS


def parse_output(url: str, raw_output: str) -> AuditResult:
    """Turns pa11y's JSON reporter output into an :class:`AuditResult`."""

    if not raw_output.strip():
        return AuditResult(url=url, document_title=None, issues=())

    try:
        data: Any = json.loads(raw_output)
    except json.JSONDecodeError as exc:
        raise AuditError(f"pa11y returned invalid JSON: {exc}") from exc

    document_title: Optional[str] = None
    if isinstance(data, dict):
        document_title = data.get("documentTitle") or None
        candidates = data.get("issues") or []
    elif isinstance(data, list):
        candidates = data
    else:
        raise AuditError("pa11y returned an unexpected JSON document")

    issues = tuple(
        AuditIssue.from_mapping(item, default_runner="htmlcs")
        for item in candidates
        if isinstance(item, dict)
    )
    return AuditResult(url=url, document_title=document_title, issues=issues)


def _execute_pa11y(command: Sequence[str], *, timeout: float) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        list(command),
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )


class Pa11yAuditor:
    """Audits a page by running the pa11y command line tool."""

    engine_name = "pa11y"

    def __init__(
        self,
        executable: Optional[str] = None,
        title_lookup: Optional[Callable[[str], Optional[str]]] = None,
    ) -> None:
        self.executable = executable
        self.title_lookup = title_lookup

    def _resolve_executable(self) -> str:
        executable = self.executable or shutil.which("pa11y")
        if not executable:
            raise AuditError("pa11y not found on PATH")
        return executable

    def audit(self, url: str, options: AuditOptions) -> AuditResult:
        command = build_command(self._resolve_executable(), url, options)
        timeout = _process_timeout(options)
        logger.debug("Running %s", " ".join(command))

        try:
            completed = _execute_pa11y(command, timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            raise AuditError(f"pa11y timed out after {timeout:.0f}s") from exc
        except FileNotFoundError as exc:
            raise AuditError("pa11y could not be executed") from exc

        stdout = (completed.stdout or "").strip()
        stderr = (completed.stderr or "").strip()

        if completed.returncode not in SUCCESS_RETURN_CODES:
            detail = _trim_output(stderr or stdout) or "no output"
            raise AuditError(f"pa11y exited with code {completed.returncode}: {detail}")

        result = parse_output(url, stdout)
        # The JSON reporter may emit only the issue list, without documentTitle.
        if result.document_title is None and self.title_lookup is not None:
            result = replace(result, document_title=self.title_lookup(url))
        return result

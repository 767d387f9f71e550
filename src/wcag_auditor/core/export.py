"""Tabular export of audit issue records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .artifacts import EXPORT_COLUMNS, AuditIssueRecord
from .errors import ExportError

logger = logging.getLogger(__name__)

SHEET_NAME = "WCAG Issues"


def records_to_frame(records: Sequence[AuditIssueRecord]) -> pd.DataFrame:
    """One row per record, columns in export order."""

    return pd.DataFrame([record.as_row() for record in records], columns=list(EXPORT_COLUMNS))


def export_records(records: Sequence[AuditIssueRecord], path: Path) -> Optional[Path]:
    """Writes the records to ``path`` as ``.xlsx`` or ``.csv``.

    Returns the written path, or ``None`` when there was nothing to write.
    Raises :class:`ExportError` when the file cannot be produced.
    """

    if not records:
        logger.warning("No audit records to export; skipping %s", path)
        return None

    output_file = Path(path)
    suffix = output_file.suffix.lower()
    if suffix not in {".xlsx", ".csv"}:
        raise ExportError(f"Unsupported export format {suffix or '(none)'!r} for {output_file}")

    frame = records_to_frame(records)

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".csv":
            frame.to_csv(output_file, index=False, encoding="utf-8")
        else:
            frame.to_excel(output_file, index=False, sheet_name=SHEET_NAME, engine="openpyxl")
    except (OSError, ValueError) as exc:
        raise ExportError(f"Could not write {output_file}: {exc}") from exc

    logger.info("Exported %d record(s) to %s", len(frame), output_file)
    return output_file

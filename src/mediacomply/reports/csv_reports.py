"""CSV writers for audit reports and conversion summaries.

Both files are UTF-8, written once per run, and replaced atomically so a
crash never leaves a truncated report behind.
"""

from __future__ import annotations

import csv
import io
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mediacomply.domain.models import ConversionOutcome
from mediacomply.pipeline.processor import AuditEntry

AUDIT_COLUMNS = [
    "Path",
    "VideoCodec",
    "Profile",
    "PixFmt",
    "AudioCodecs",
    "Action",
    "Reason",
]

SUMMARY_COLUMNS = ["Status", "Path", "Title", "Reason"]

DEFAULT_AUDIT_REPORT = "compliance_audit.csv"
DEFAULT_CONVERSION_SUMMARY = "conversion_summary.csv"


def render_csv(rows: list[dict[str, Any]], columns: list[str]) -> str:
    """Render rows as CSV with headers.

    Args:
        rows: List of row dictionaries.
        columns: Column keys, in order.

    Returns:
        CSV formatted string with headers.
    """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(
            {col: "" if row.get(col) is None else str(row[col]) for col in columns}
        )
    return output.getvalue()


def _atomic_write_text(path: Path, content: str) -> None:
    """Write content to path via a temp file in the same directory + rename.

    Raises:
        OSError: If write or rename fails.
    """
    fd, temp_path_str = tempfile.mkstemp(suffix=path.suffix, dir=path.parent, text=True)
    temp_path = Path(temp_path_str)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        temp_path.replace(path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def audit_rows(entries: Sequence[AuditEntry]) -> list[dict[str, Any]]:
    rows = []
    for entry in entries:
        probe = entry.probe
        rows.append(
            {
                "Path": entry.media_file.path,
                "VideoCodec": probe.video_codec if probe else "",
                "Profile": probe.video_profile if probe else "",
                "PixFmt": probe.pix_fmt if probe else "",
                "AudioCodecs": ",".join(probe.audio_codecs) if probe else "",
                "Action": entry.decision.action.value,
                "Reason": entry.decision.reason,
            }
        )
    return rows


def summary_rows(outcomes: Sequence[ConversionOutcome]) -> list[dict[str, Any]]:
    return [
        {
            "Status": outcome.status.value,
            "Path": outcome.path,
            "Title": outcome.title,
            "Reason": outcome.reason,
        }
        for outcome in outcomes
    ]


def write_audit_report(entries: Sequence[AuditEntry], output_path: Path) -> None:
    """Write the audit CSV, one row per scanned file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_text(output_path, render_csv(audit_rows(entries), AUDIT_COLUMNS))


def write_conversion_summary(
    outcomes: Sequence[ConversionOutcome],
    output_path: Path,
) -> None:
    """Write the conversion summary CSV, one row per touched file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_text(
        output_path, render_csv(summary_rows(outcomes), SUMMARY_COLUMNS)
    )

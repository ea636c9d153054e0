"""Audit and conversion summary reports."""

from mediacomply.reports.csv_reports import (
    AUDIT_COLUMNS,
    DEFAULT_AUDIT_REPORT,
    DEFAULT_CONVERSION_SUMMARY,
    SUMMARY_COLUMNS,
    render_csv,
    write_audit_report,
    write_conversion_summary,
)

__all__ = [
    "AUDIT_COLUMNS",
    "DEFAULT_AUDIT_REPORT",
    "DEFAULT_CONVERSION_SUMMARY",
    "SUMMARY_COLUMNS",
    "render_csv",
    "write_audit_report",
    "write_conversion_summary",
]

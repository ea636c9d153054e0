"""Audit and convert processing."""

from mediacomply.pipeline.processor import (
    AuditEntry,
    ConversionPipeline,
    RunSummary,
    audit_files,
    evaluate,
)
from mediacomply.pipeline.recorder import OutcomeCollector, OutcomeRecorder

__all__ = [
    "AuditEntry",
    "ConversionPipeline",
    "OutcomeCollector",
    "OutcomeRecorder",
    "RunSummary",
    "audit_files",
    "evaluate",
]

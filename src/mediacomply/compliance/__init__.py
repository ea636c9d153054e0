"""Compliance rules shared by audit and convert."""

from mediacomply.compliance.classifier import (
    ACCEPTED_PIX_FMTS,
    ACCEPTED_PROFILES,
    COMPLIANT_REASON,
    TARGET_AUDIO_CODEC,
    TARGET_VIDEO_CODEC,
    classify,
    decision_for_probe_error,
)

__all__ = [
    "ACCEPTED_PIX_FMTS",
    "ACCEPTED_PROFILES",
    "COMPLIANT_REASON",
    "TARGET_AUDIO_CODEC",
    "TARGET_VIDEO_CODEC",
    "classify",
    "decision_for_probe_error",
]

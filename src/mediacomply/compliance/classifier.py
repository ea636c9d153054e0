"""Compliance classification for probed media files.

The classifier is a pure function over StreamProbeResult. Both the read-only
audit and the destructive convert command go through classify(), so the two
can never disagree about a file.
"""

from __future__ import annotations

from mediacomply.domain.enums import ComplianceAction
from mediacomply.domain.exceptions import ProbeError
from mediacomply.domain.models import ComplianceDecision, StreamProbeResult

TARGET_VIDEO_CODEC = "hevc"

# Two spellings of the same 10-bit main profile (ffprobe vs. encoder output)
ACCEPTED_PROFILES: tuple[str, ...] = ("Main 10", "main10")

# 10-bit 4:2:0 surfaces: p010le from hardware encoders, yuv420p10le from x265
ACCEPTED_PIX_FMTS: tuple[str, ...] = ("p010le", "yuv420p10le")

TARGET_AUDIO_CODEC = "aac"

COMPLIANT_REASON = "Already compliant"


def _display(value: str) -> str:
    return value if value else "<none>"


def check_video_codec(probe: StreamProbeResult) -> str | None:
    """Return a violation reason if the video codec is not the target."""
    if probe.video_codec != TARGET_VIDEO_CODEC:
        return (
            f"Video codec is {_display(probe.video_codec)}, "
            f"expected {TARGET_VIDEO_CODEC}"
        )
    return None


def check_profile(probe: StreamProbeResult) -> str | None:
    """Return a violation reason if the profile is not an accepted spelling."""
    if probe.video_profile not in ACCEPTED_PROFILES:
        return (
            f"Video profile is {_display(probe.video_profile)}, "
            f"expected {' or '.join(ACCEPTED_PROFILES)}"
        )
    return None


def check_pix_fmt(probe: StreamProbeResult) -> str | None:
    """Return a violation reason if the pixel format is not 10-bit 4:2:0."""
    if probe.pix_fmt not in ACCEPTED_PIX_FMTS:
        return (
            f"Pixel format is {_display(probe.pix_fmt)}, "
            f"expected {' or '.join(ACCEPTED_PIX_FMTS)}"
        )
    return None


def check_audio(probe: StreamProbeResult) -> str | None:
    """Return a violation reason unless every audio stream is the target codec.

    A file without audio streams is non-compliant. Offending codecs are
    reported distinct and sorted, so stream order never affects the result.
    """
    if not probe.audio_codecs:
        return "No audio streams"
    offending = sorted({c for c in probe.audio_codecs if c != TARGET_AUDIO_CODEC})
    if offending:
        return (
            f"Audio codec is {', '.join(offending)}, "
            f"expected {TARGET_AUDIO_CODEC}"
        )
    return None


# Evaluated in order; every rule runs and all violations are reported
RULES = (check_video_codec, check_profile, check_pix_fmt, check_audio)


def classify(probe: StreamProbeResult) -> ComplianceDecision:
    """Decide whether a file is compliant or needs conversion.

    Args:
        probe: Stream metadata for one file.

    Returns:
        KEEP with "Already compliant" if every rule passes, otherwise CONVERT
        with one reason per failing rule in rule order.
    """
    reasons = tuple(
        reason for reason in (rule(probe) for rule in RULES) if reason is not None
    )
    if not reasons:
        return ComplianceDecision(ComplianceAction.KEEP, (COMPLIANT_REASON,))
    return ComplianceDecision(ComplianceAction.CONVERT, reasons)


def decision_for_probe_error(error: ProbeError) -> ComplianceDecision:
    """Build the ERROR decision for a file whose compliance is unknown."""
    return ComplianceDecision(
        ComplianceAction.ERROR,
        (f"Probe failed ({error.kind.value}): {error}",),
    )

"""Domain models for mediacomply.

Plain frozen dataclasses passed between the probe, the classifier, the
encoder chain and the swap transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mediacomply.domain.enums import ComplianceAction, OutcomeStatus

# Separator used when joining reason strings for reports
REASON_SEPARATOR = "; "


@dataclass(frozen=True)
class MediaFile:
    """A candidate media file observed on disk."""

    path: Path
    extension: str  # lower-case, without the leading dot

    @classmethod
    def from_path(cls, path: Path) -> MediaFile:
        """Build a MediaFile from a filesystem path."""
        resolved = path.expanduser().resolve()
        return cls(path=resolved, extension=resolved.suffix.lstrip(".").casefold())

    @property
    def title(self) -> str:
        """Display title (file name without extension)."""
        return self.path.stem


@dataclass(frozen=True)
class StreamProbeResult:
    """Stream metadata needed to decide compliance for one file."""

    video_codec: str
    video_profile: str
    pix_fmt: str
    audio_codecs: tuple[str, ...] = ()
    """Audio codec names in stream order. Empty means the file has no audio."""


@dataclass(frozen=True)
class ComplianceDecision:
    """Result of classifying one probe result."""

    action: ComplianceAction
    reasons: tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        """Reasons joined for reporting."""
        return REASON_SEPARATOR.join(self.reasons)

    @property
    def needs_conversion(self) -> bool:
        return self.action == ComplianceAction.CONVERT


@dataclass(frozen=True)
class EncodeAttemptResult:
    """Outcome of invoking one encoder against one input file."""

    encoder: str | None
    success: bool
    exit_status: int | None = None
    timed_out: bool = False
    message: str = ""


@dataclass(frozen=True)
class ConversionOutcome:
    """Terminal outcome of one file, handed to the outcome recorder."""

    status: OutcomeStatus
    path: Path
    """Final path on success, the original path otherwise."""

    title: str
    reason: str = ""
    encoder: str | None = None
    backup_path: Path | None = None
    attempts: tuple[EncodeAttemptResult, ...] = field(default_factory=tuple)

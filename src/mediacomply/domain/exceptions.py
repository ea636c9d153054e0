"""Exception hierarchy for mediacomply.

Encoder attempts and file swaps do not raise: they report through
EncodeAttemptResult and SwapResult values that callers branch on.
"""

from __future__ import annotations

from pathlib import Path

from mediacomply.domain.enums import ProbeErrorKind


class MediaComplyError(Exception):
    """Base exception for all mediacomply errors."""


class ConfigError(MediaComplyError):
    """Raised when configuration is invalid."""


class MissingToolError(MediaComplyError):
    """Raised when a required external tool cannot be resolved.

    Attributes:
        tool_name: Name of the missing tool (e.g. "ffprobe").
    """

    def __init__(self, tool_name: str, hint: str = "") -> None:
        self.tool_name = tool_name
        message = f"Required tool not available: {tool_name}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ProbeError(MediaComplyError):
    """Raised when stream metadata cannot be determined for a file.

    Attributes:
        kind: Why the probe failed.
        path: File that was probed.
    """

    def __init__(self, kind: ProbeErrorKind, path: Path, message: str) -> None:
        self.kind = kind
        self.path = path
        super().__init__(message)


class EncoderConfigError(MediaComplyError):
    """Raised when an encoder chain definition is invalid."""

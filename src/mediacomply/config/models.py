"""Configuration data models.

This module defines dataclasses for mediacomply configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from mediacomply.domain.enums import FailurePolicy


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class EncodingConfig:
    """Configuration for probing and encoding."""

    # Timeout for each ffprobe invocation (seconds)
    probe_timeout_seconds: int = 60

    # Timeout for each encoder attempt (seconds, None = no limit)
    encode_timeout_seconds: int | None = None

    # Optional YAML file replacing the built-in encoder chain
    encoders_file: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.probe_timeout_seconds < 1:
            raise ValueError(
                "probe_timeout_seconds must be at least 1, "
                f"got {self.probe_timeout_seconds}"
            )
        if self.encode_timeout_seconds is not None and self.encode_timeout_seconds < 1:
            raise ValueError(
                "encode_timeout_seconds must be at least 1, "
                f"got {self.encode_timeout_seconds}"
            )


@dataclass
class BehaviorConfig:
    """Configuration for run-level behavior."""

    # What to do with the remaining files after a conversion fails
    on_failure: FailurePolicy = FailurePolicy.STOP


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class AppConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

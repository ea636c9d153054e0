"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building AppConfig by composing
multiple configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from mediacomply.config.env import EnvReader
from mediacomply.config.models import (
    AppConfig,
    BehaviorConfig,
    EncodingConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from mediacomply.domain.enums import FailurePolicy
from mediacomply.domain.exceptions import ConfigError


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Encoding config
    probe_timeout_seconds: int | None = None
    encode_timeout_seconds: int | None = None
    encoders_file: Path | None = None

    # Behavior config
    on_failure: str | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds AppConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        """Initialize the builder with no values set."""
        self._values: dict[str, Any] = {}
        self._origins: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded as the origin of each applied value.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._origins[field_obj.name] = source_name

    def origin_of(self, key: str) -> str:
        """Return which source supplied a value ("default" if none did)."""
        return self._origins.get(key, "default")

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> AppConfig:
        """Build the final AppConfig with defaults for unset values.

        Returns:
            Complete AppConfig with all values resolved.

        Raises:
            ConfigError: If a value fails validation.
        """
        try:
            tools = ToolPathsConfig(
                ffmpeg=self._get("ffmpeg_path", None),
                ffprobe=self._get("ffprobe_path", None),
            )

            encoding = EncodingConfig(
                probe_timeout_seconds=self._get("probe_timeout_seconds", 60),
                encode_timeout_seconds=self._get("encode_timeout_seconds", None),
                encoders_file=self._get("encoders_file", None),
            )

            behavior = BehaviorConfig(
                on_failure=FailurePolicy(self._get("on_failure", "stop")),
            )

            logging_config = LoggingConfig(
                level=self._get("logging_level", "info"),
                file=self._get("logging_file", None),
                format=self._get("logging_format", "text"),
                include_stderr=self._get("logging_include_stderr", False),
                max_bytes=self._get("logging_max_bytes", 10_485_760),
                backup_count=self._get("logging_backup_count", 5),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return AppConfig(
            tools=tools,
            encoding=encoding,
            behavior=behavior,
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    return Path(str(value)).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary from TOML file.

    Returns:
        ConfigSource with values from the config file.
    """
    tools = file_config.get("tools", {})
    encoding = file_config.get("encoding", {})
    behavior = file_config.get("behavior", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        # Tool paths
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        # Encoding
        probe_timeout_seconds=encoding.get("probe_timeout_seconds"),
        encode_timeout_seconds=encoding.get("encode_timeout_seconds"),
        encoders_file=_optional_path(encoding.get("encoders_file")),
        # Behavior
        on_failure=behavior.get("on_failure"),
        # Logging
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from environment variables.

    Args:
        reader: EnvReader instance for reading environment variables.

    Returns:
        ConfigSource with values from environment variables.
    """
    return ConfigSource(
        # Tool paths
        ffmpeg_path=reader.get_path("FFMPEG_PATH"),
        ffprobe_path=reader.get_path("FFPROBE_PATH"),
        # Encoding
        probe_timeout_seconds=reader.get_int("PROBE_TIMEOUT"),
        encode_timeout_seconds=reader.get_int("ENCODE_TIMEOUT"),
        encoders_file=reader.get_path("ENCODERS_FILE"),
        # Behavior
        on_failure=reader.get_str("ON_FAILURE"),
        # Logging
        logging_level=reader.get_str("LOG_LEVEL"),
        logging_file=reader.get_path("LOG_FILE", must_exist=False),
        logging_format=reader.get_str("LOG_FORMAT"),
    )

"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (MEDIACOMPLY_*)
3. Config file (~/.mediacomply/config.toml)
4. Default values

Environment variables:
- MEDIACOMPLY_FFMPEG_PATH: Path to ffmpeg executable
- MEDIACOMPLY_FFPROBE_PATH: Path to ffprobe executable
- MEDIACOMPLY_PROBE_TIMEOUT: Seconds allowed per ffprobe call
- MEDIACOMPLY_ENCODE_TIMEOUT: Seconds allowed per encoder attempt
- MEDIACOMPLY_ENCODERS_FILE: YAML file replacing the built-in encoder chain
- MEDIACOMPLY_ON_FAILURE: "stop" or "continue"
- MEDIACOMPLY_LOG_LEVEL / MEDIACOMPLY_LOG_FILE / MEDIACOMPLY_LOG_FORMAT
- MEDIACOMPLY_CONFIG_PATH: Path to config file (overrides default location)
- MEDIACOMPLY_DATA_DIR: Base directory (overrides ~/.mediacomply/)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from mediacomply.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from mediacomply.config.env import EnvReader
from mediacomply.config.models import AppConfig
from mediacomply.config.toml_parser import load_toml_file

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".mediacomply"
CONFIG_FILE_NAME = "config.toml"


def get_data_dir() -> Path:
    """Get the mediacomply data directory.

    Can be overridden by MEDIACOMPLY_DATA_DIR environment variable.
    Supports tilde expansion.

    Returns:
        Path to the data directory (~/.mediacomply/ by default).
    """
    env_path = os.environ.get("MEDIACOMPLY_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_DATA_DIR


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by MEDIACOMPLY_CONFIG_PATH environment variable.

    Returns:
        Path to config file.
    """
    env_path = os.environ.get("MEDIACOMPLY_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / CONFIG_FILE_NAME


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise TomlParseError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()
    return load_toml_file(path, strict=strict)


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    encoders_file: Path | None = None,
    on_failure: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> AppConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MEDIACOMPLY_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        encoders_file: CLI override for the encoder chain YAML file.
        on_failure: CLI override for the failure policy.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise TomlParseError on config file parse failures.

    Returns:
        AppConfig with merged configuration.

    Raises:
        ConfigError: If a merged value is invalid.
        TomlParseError: When strict=True and the config file cannot be parsed.
    """
    reader = env_reader or EnvReader()

    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        encoders_file=encoders_file,
        on_failure=on_failure,
    )

    # Build with precedence: file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    builder.apply(cli_source, source_name="cli")

    config = builder.build()
    logger.debug(
        "Configuration loaded",
        extra={
            "on_failure": config.behavior.on_failure.value,
            "on_failure_source": builder.origin_of("on_failure"),
            "encoders_file": str(config.encoding.encoders_file or ""),
        },
    )
    return config

"""Configuration management for mediacomply.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (MEDIACOMPLY_*)
3. Config file (~/.mediacomply/config.toml)
4. Default values (lowest priority)
"""

from mediacomply.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from mediacomply.config.env import EnvReader
from mediacomply.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from mediacomply.config.logging_factory import build_logging_config
from mediacomply.config.models import (
    AppConfig,
    BehaviorConfig,
    EncodingConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from mediacomply.config.toml_parser import TomlParseError, load_toml_file

__all__ = [
    # Models
    "AppConfig",
    "BehaviorConfig",
    "EncodingConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    # Loader
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Builder
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
    "build_logging_config",
    "load_toml_file",
    "TomlParseError",
]

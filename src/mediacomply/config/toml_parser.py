"""TOML config file loading."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from mediacomply.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)


class TomlParseError(ConfigError):
    """Raised when a TOML config file cannot be parsed."""


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load a TOML file into a dictionary.

    Args:
        path: Path to the TOML file.
        strict: If True, raise TomlParseError on parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed dictionary. Empty dict if the file does not exist.

    Raises:
        TomlParseError: When strict=True and the file cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise TomlParseError(f"Failed to parse {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}

"""MEDIACOMPLY_* environment overrides.

EnvReader looks variables up by their short name ("PROBE_TIMEOUT" reads
MEDIACOMPLY_PROBE_TIMEOUT). A variable that is unset or blank reads as None,
so an exported-but-empty override never masks the config file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEDIACOMPLY_"


class EnvReader:
    """Typed access to MEDIACOMPLY_* variables.

    Example:
        reader = EnvReader(env={"MEDIACOMPLY_PROBE_TIMEOUT": "30"})
        reader.get_int("PROBE_TIMEOUT")  # 30
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> None:
        """Initialize the reader.

        Args:
            env: Mapping to read instead of os.environ.
            prefix: Prepended to every short name.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self._prefix = prefix

    def var_name(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def get_str(self, name: str) -> str | None:
        value = self._env.get(self.var_name(name), "").strip()
        return value or None

    def get_int(self, name: str) -> int | None:
        """Read a non-negative integer such as a timeout in seconds.

        Unparseable or negative values are logged and ignored.
        """
        value = self.get_str(name)
        if value is None:
            return None
        try:
            number = int(value)
        except ValueError:
            number = -1
        if number < 0:
            logger.warning(
                "Ignoring %s=%r: expected a whole number of seconds",
                self.var_name(name),
                value,
            )
            return None
        return number

    def get_path(self, name: str, must_exist: bool = True) -> Path | None:
        """Read a path, expanding "~".

        With must_exist set, a path that does not exist is logged and
        ignored so a stale tool override falls back to PATH lookup.
        """
        value = self.get_str(name)
        if value is None:
            return None
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Ignoring %s: %s does not exist", self.var_name(name), value
            )
            return None
        return path

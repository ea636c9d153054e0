"""External tool resolution.

ToolLocator resolves ffprobe/ffmpeg to executable paths from configured
overrides or the system PATH. Components receive a locator explicitly
instead of consulting a module-level registry.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from pathlib import Path

from mediacomply.config.models import ToolPathsConfig
from mediacomply.domain.exceptions import MissingToolError

logger = logging.getLogger(__name__)

# Install hints shown when a tool is missing
INSTALL_HINTS: dict[str, str] = {
    "ffmpeg": (
        "Install ffmpeg (https://ffmpeg.org/download.html) or set "
        "MEDIACOMPLY_FFMPEG_PATH / [tools] ffmpeg in config.toml"
    ),
    "ffprobe": (
        "ffprobe ships with ffmpeg (https://ffmpeg.org/download.html); or set "
        "MEDIACOMPLY_FFPROBE_PATH / [tools] ffprobe in config.toml"
    ),
}


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


class ToolLocator:
    """Resolves external tools to executable paths.

    Resolution results are memoized per locator instance.

    Example:
        locator = ToolLocator.from_config(config.tools)
        ffprobe = locator.require("ffprobe")
    """

    def __init__(self, configured: Mapping[str, Path | None] | None = None) -> None:
        """Initialize the locator.

        Args:
            configured: Optional mapping of tool name to configured path.
        """
        self._configured: dict[str, Path | None] = dict(configured or {})
        self._resolved: dict[str, Path | None] = {}

    @classmethod
    def from_config(cls, tools: ToolPathsConfig) -> ToolLocator:
        """Create a locator from the [tools] configuration section."""
        return cls({"ffmpeg": tools.ffmpeg, "ffprobe": tools.ffprobe})

    def find(self, name: str) -> Path | None:
        """Get path to a tool, or None if not available.

        Unlike require, this doesn't raise an error.
        """
        if name not in self._resolved:
            path = find_tool(name, self._configured.get(name))
            self._resolved[name] = path
            logger.debug(
                "Resolved tool %s: %s",
                name,
                path or "<missing>",
                extra={"tool": name},
            )
        return self._resolved[name]

    def require(self, name: str) -> Path:
        """Get path to a required tool.

        Raises:
            MissingToolError: If the tool is not available.
        """
        path = self.find(name)
        if path is None:
            raise MissingToolError(name, INSTALL_HINTS.get(name, ""))
        return path

    def missing(self, *names: str) -> list[str]:
        """Return the subset of names that cannot be resolved."""
        return [name for name in names if self.find(name) is None]


class StaticToolLocator(ToolLocator):
    """Locator with fixed, pre-resolved paths.

    Paths are used as given without checking the filesystem; a None value
    marks the tool as missing.
    """

    def __init__(self, paths: Mapping[str, Path | None]) -> None:
        super().__init__()
        self._resolved = dict(paths)

    def find(self, name: str) -> Path | None:
        return self._resolved.get(name)

"""External tool resolution for ffprobe and ffmpeg."""

from mediacomply.tools.locator import (
    INSTALL_HINTS,
    StaticToolLocator,
    ToolLocator,
    find_tool,
)

__all__ = [
    "INSTALL_HINTS",
    "StaticToolLocator",
    "ToolLocator",
    "find_tool",
]

"""Root logger setup for a mediacomply run."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mediacomply.logging.context import FileContextFilter
from mediacomply.logging.handlers import JSONFormatter, TextFormatter

if TYPE_CHECKING:
    from mediacomply.config.models import LoggingConfig

# CRITICAL is not configurable: it is reserved for inconsistent-state swaps
_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating run log, or return None if it cannot be created."""
    assert config.file is not None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: cannot open log file {path}: {e}; using stderr\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    Output goes to the log file when one is configured and can be opened,
    and to stderr when include_stderr is set or there is no file. When only
    the file is written, CRITICAL records are still echoed to stderr so an
    inconsistent swap is never visible in the log alone.
    """
    level = _LEVELS.get(config.level.casefold(), logging.INFO)
    formatter: logging.Formatter = (
        JSONFormatter() if config.format.casefold() == "json" else TextFormatter()
    )
    context_filter = FileContextFilter()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    def install(handler: logging.Handler, handler_level: int) -> None:
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    file_handler = _open_log_file(config) if config.file else None
    if file_handler is not None:
        install(file_handler, level)

    if config.include_stderr or file_handler is None:
        install(logging.StreamHandler(sys.stderr), level)
    else:
        install(logging.StreamHandler(sys.stderr), logging.CRITICAL)

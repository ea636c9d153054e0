"""Per-file context for structured logging.

Provides context propagation using contextvars, enabling automatic injection
of file_id and file_path into every log record emitted while one file is
being processed (including from audit worker threads).
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_file_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


def format_file_id(index: int, total: int) -> str:
    """Build a zero-padded file identifier such as "F007".

    Args:
        index: 1-based position of the file in the run.
        total: Number of files in the run (sets the padding width).
    """
    width = len(str(max(total, 1)))
    return f"F{index:0{width}d}"


@contextmanager
def file_context(
    file_id: str,
    file_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager for per-file processing context.

    Sets the context on entry and restores the previous one on exit.

    Example:
        with file_context("F001", "/media/Show/ep1.avi"):
            logger.info("Probing")  # record carries file_id/file_path
    """
    id_token = _file_id.set(file_id)
    path_token = _file_path.set(str(file_path) if file_path is not None else None)
    try:
        yield
    finally:
        _file_id.reset(id_token)
        _file_path.reset(path_token)


def get_file_context() -> tuple[str | None, str | None]:
    """Get current file context.

    Returns:
        Tuple of (file_id, file_path), either may be None.
    """
    return _file_id.get(), _file_path.get()


class FileContextFilter(logging.Filter):
    """Logging filter that injects file context into log records.

    Adds file_id and file_path attributes for JSON output and a compact
    file_tag like "[F001] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject file context into log record.

        Returns:
            Always True (does not filter, only enriches).
        """
        file_id, file_path = get_file_context()

        record.file_id = file_id
        record.file_path = file_path
        record.file_tag = f"[{file_id}] " if file_id else ""

        return True

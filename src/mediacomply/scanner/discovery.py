"""Candidate file discovery under a media root."""

from __future__ import annotations

import logging
from pathlib import Path

from mediacomply.domain.models import MediaFile
from mediacomply.executor.swap import is_temp_output

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {
    ".mkv",
    ".mp4",
    ".avi",
    ".mov",
    ".wmv",
    ".flv",
    ".webm",
    ".m4v",
    ".ts",
    ".m2ts",
    ".mpg",
    ".mpeg",
}


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_candidates(
    root: Path,
    recursive: bool = True,
    exclude_under: Path | None = None,
) -> list[MediaFile]:
    """Find video files to audit or convert.

    In-progress encoder outputs, hidden files and directories, and anything
    under exclude_under (the backup root) are skipped.

    Args:
        root: Media root directory, or a single file.
        recursive: Search subdirectories.
        exclude_under: Directory whose contents are never candidates.

    Returns:
        MediaFile entries sorted by path.
    """
    root = root.expanduser().resolve()
    excluded = exclude_under.expanduser().resolve() if exclude_under else None

    if root.is_file():
        candidates = [root] if root.suffix.lower() in VIDEO_EXTENSIONS else []
        base = root.parent
    elif root.is_dir():
        candidates = list(root.rglob("*") if recursive else root.iterdir())
        base = root
    else:
        return []

    files = []
    for path in candidates:
        if path.suffix.lower() not in VIDEO_EXTENSIONS or not path.is_file():
            continue
        if is_temp_output(path):
            logger.debug("Skipping in-progress output: %s", path)
            continue
        if _is_hidden(path, base):
            continue
        if excluded is not None and path.resolve().is_relative_to(excluded):
            continue
        files.append(MediaFile.from_path(path))

    files.sort(key=lambda f: f.path)
    logger.debug("Discovered %d candidate files under %s", len(files), root)
    return files

"""Atomic swap of an encoded file into place.

Order of operations for a file MediaRoot/Show/ep1.avi:

1. verify   .mediacomply-inprogress.ep1.mkv exists and is non-empty
2. precheck backup destination free, final path free (or the source itself)
3. backup   MediaRoot/Show/ep1.avi -> BackupRoot/Show/ep1.avi
4. promote  .mediacomply-inprogress.ep1.mkv -> MediaRoot/Show/ep1.mkv

The original is never deleted: it is either at its source path or at its
backup path. Every step reports through a SwapResult instead of raising. A
failure in step 4 leaves the original archived and the final file missing;
that result is marked inconsistent and never rolled back automatically.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from mediacomply.domain.enums import SwapStage

logger = logging.getLogger(__name__)

# Reserved prefix for in-progress encoder output; discovery skips these
TEMP_PREFIX = ".mediacomply-inprogress."
FINAL_SUFFIX = ".mkv"


def temp_output_path(source: Path) -> Path:
    """Return the private temp output path next to source."""
    return source.with_name(f"{TEMP_PREFIX}{source.stem}{FINAL_SUFFIX}")


def is_temp_output(path: Path) -> bool:
    """Return True if path follows the in-progress naming convention."""
    return path.name.startswith(TEMP_PREFIX)


def final_path_for(source: Path) -> Path:
    """Return the converted file's path: same directory and stem, .mkv."""
    return source.with_suffix(FINAL_SUFFIX)


def backup_path_for(source: Path, media_root: Path, backup_root: Path) -> Path:
    """Mirror source's path relative to media_root under backup_root.

    Raises:
        ValueError: If source is not strictly inside media_root.
    """
    relative = source.resolve().relative_to(media_root.resolve())
    if relative == Path("."):
        raise ValueError(f"{source} is the media root, not a file inside it")
    return backup_root.resolve() / relative


@dataclass(frozen=True)
class SwapTransaction:
    """Paths involved in swapping one converted file into place."""

    source_path: Path
    temp_path: Path
    final_path: Path
    backup_path: Path


@dataclass(frozen=True)
class SwapResult:
    """Outcome of checking or executing a swap.

    failed_stage is None when the step completed. A PROMOTE failure means
    the original is archived at backup_path while the final file is missing.
    """

    transaction: SwapTransaction
    failed_stage: SwapStage | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.failed_stage is None

    @property
    def inconsistent(self) -> bool:
        return self.failed_stage == SwapStage.PROMOTE

    @property
    def final_path(self) -> Path:
        return self.transaction.final_path

    @property
    def backup_path(self) -> Path:
        return self.transaction.backup_path


def plan_swap(source: Path, media_root: Path, backup_root: Path) -> SwapTransaction:
    """Compute every path of the swap for source.

    Raises:
        ValueError: If source is not a file inside media_root.
    """
    source = source.resolve()
    return SwapTransaction(
        source_path=source,
        temp_path=temp_output_path(source),
        final_path=final_path_for(source),
        backup_path=backup_path_for(source, media_root, backup_root),
    )


def _verify_temp(tx: SwapTransaction) -> SwapResult:
    try:
        size = tx.temp_path.stat().st_size
    except FileNotFoundError:
        return SwapResult(
            tx, SwapStage.VERIFY, f"Encoded output missing: {tx.temp_path}"
        )
    except OSError as e:
        return SwapResult(
            tx, SwapStage.VERIFY, f"Cannot inspect encoded output {tx.temp_path}: {e}"
        )
    if size == 0:
        try:
            tx.temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove empty output %s: %s", tx.temp_path, e)
        return SwapResult(
            tx, SwapStage.VERIFY, f"Encoded output is empty: {tx.temp_path}"
        )
    return SwapResult(tx)


def precheck_swap(tx: SwapTransaction) -> SwapResult:
    """Check that the swap would not overwrite an existing file.

    Returns:
        A successful result, or a PRECHECK failure naming the collision.
    """
    try:
        if tx.backup_path.exists():
            return SwapResult(
                tx,
                SwapStage.PRECHECK,
                f"Backup destination already exists: {tx.backup_path}",
            )
        if tx.final_path != tx.source_path and tx.final_path.exists():
            return SwapResult(
                tx,
                SwapStage.PRECHECK,
                f"Final path already exists: {tx.final_path}",
            )
    except OSError as e:
        return SwapResult(
            tx, SwapStage.PRECHECK, f"Cannot check swap destinations: {e}"
        )
    return SwapResult(tx)


def execute_swap(tx: SwapTransaction) -> SwapResult:
    """Archive the original and promote the encoded output.

    Args:
        tx: Planned transaction.

    Returns:
        SwapResult. On a VERIFY, PRECHECK or BACKUP failure the original is
        still at its source path and the temp output is removed only when it
        was empty. On a PROMOTE failure the original is at its backup path
        and the temp output is left in place.
    """
    for check in (_verify_temp, precheck_swap):
        result = check(tx)
        if not result.succeeded:
            return result

    try:
        tx.backup_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(tx.source_path), str(tx.backup_path))
    except OSError as e:
        return SwapResult(
            tx,
            SwapStage.BACKUP,
            f"Failed to move original to backup {tx.backup_path}: {e}",
        )
    logger.info("Archived original to %s", tx.backup_path)

    try:
        shutil.move(str(tx.temp_path), str(tx.final_path))
    except OSError as e:
        return SwapResult(
            tx,
            SwapStage.PROMOTE,
            f"Original archived at {tx.backup_path} but promoting "
            f"{tx.temp_path} to {tx.final_path} failed: {e}",
        )

    logger.info("Promoted converted file to %s", tx.final_path)
    return SwapResult(tx)

"""Short-lived external tool calls.

run_tool runs a query-style tool (ffprobe) to completion and hands back a
ToolRun with everything callers need to classify the outcome. Long-running
encodes stream stderr instead and live in mediacomply.executor.ffmpeg_runner.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - required to invoke ffprobe
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolRun:
    """Captured result of one completed tool invocation."""

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int
    elapsed: float = 0.0

    @property
    def tool(self) -> str:
        return Path(self.args[0]).name if self.args else "unknown"

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def last_error_line(self) -> str:
        """Last non-blank stderr line, which is where ffprobe puts the cause."""
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        return lines[-1] if lines else ""


def run_tool(args: Sequence[str | Path], timeout: float) -> ToolRun:
    """Run a tool with stdin closed and capture its text output.

    Args:
        args: Executable and arguments. Path objects are converted to str.
        timeout: Seconds before the process is killed.

    Returns:
        ToolRun for the finished process, whatever its exit status.

    Raises:
        subprocess.TimeoutExpired: If the tool outlives timeout. The child is
            killed before this propagates.
        OSError: If the executable is missing or cannot be run.
    """
    str_args = tuple(str(arg) for arg in args)
    tool = Path(str_args[0]).name
    logger.debug("Running %s", " ".join(str_args), extra={"tool": tool})

    start = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - args built by callers
            str_args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s timed out after %ss", tool, timeout, extra={"tool": tool}
        )
        raise

    run = ToolRun(
        args=str_args,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
        elapsed=round(time.monotonic() - start, 3),
    )
    logger.debug(
        "%s finished",
        tool,
        extra={"tool": tool, "returncode": run.returncode, "elapsed": run.elapsed},
    )
    return run

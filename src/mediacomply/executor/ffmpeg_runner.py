"""FFmpeg implementation of the EncodeRunner protocol."""

from __future__ import annotations

import logging
import queue
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
import time
from pathlib import Path

from mediacomply.domain.exceptions import MissingToolError
from mediacomply.domain.models import EncodeAttemptResult
from mediacomply.executor.encoders import EncoderProfile, build_ffmpeg_command
from mediacomply.tools.locator import ToolLocator

logger = logging.getLogger(__name__)

# Lines of stderr kept for the failure message
STDERR_TAIL_LINES = 5


class FFmpegEncodeRunner:
    """Runs one ffmpeg encode with an optional timeout.

    stderr is read on a separate thread so the timeout can be enforced while
    ffmpeg is still writing. A timed-out process is killed and reported as a
    failed attempt.
    """

    STDERR_DRAIN_TIMEOUT: float = 5.0
    POLL_INTERVAL: float = 0.5

    def __init__(self, locator: ToolLocator, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            locator: Resolves the ffmpeg executable.
            timeout: Maximum seconds per attempt. None means no limit.
        """
        self._locator = locator
        self._timeout = timeout

    def run(
        self,
        profile: EncoderProfile,
        source: Path,
        output: Path,
    ) -> EncodeAttemptResult:
        try:
            ffmpeg = self._locator.require("ffmpeg")
        except MissingToolError as e:
            return EncodeAttemptResult(
                encoder=profile.name, success=False, message=str(e)
            )

        cmd = build_ffmpeg_command(ffmpeg, profile, source, output)
        logger.info(
            "Encoding %s with %s",
            source.name,
            profile.name,
            extra={"encoder": profile.encoder, "priority": profile.priority},
        )
        logger.debug("ffmpeg command: %s", " ".join(cmd))

        try:
            rc, stderr_lines, timed_out = self._run_with_timeout(cmd)
        except OSError as e:
            return EncodeAttemptResult(
                encoder=profile.name,
                success=False,
                message=f"Could not execute ffmpeg ({ffmpeg}): {e}",
            )

        if timed_out:
            return EncodeAttemptResult(
                encoder=profile.name,
                success=False,
                timed_out=True,
                message=f"{profile.name} timed out after {self._timeout}s",
            )

        if rc != 0:
            tail = "".join(stderr_lines[-STDERR_TAIL_LINES:]).strip()
            return EncodeAttemptResult(
                encoder=profile.name,
                success=False,
                exit_status=rc,
                message=f"{profile.name} exited with status {rc}"
                + (f": {tail}" if tail else ""),
            )

        if not output.exists():
            return EncodeAttemptResult(
                encoder=profile.name,
                success=False,
                exit_status=rc,
                message=f"{profile.name} exited cleanly but wrote no output",
            )

        return EncodeAttemptResult(encoder=profile.name, success=True, exit_status=rc)

    def _run_with_timeout(self, cmd: list[str]) -> tuple[int, list[str], bool]:
        """Run ffmpeg, reading stderr on a thread so the timeout can fire.

        Returns:
            Tuple of (return_code, stderr_lines, timed_out). return_code is -1
            on timeout.
        """
        process = subprocess.Popen(  # nosec B603
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )

        stderr_output: list[str] = []
        stderr_queue: queue.Queue[str | None] = queue.Queue()
        stop_event = threading.Event()

        def read_stderr() -> None:
            try:
                assert process.stderr is not None
                for line in process.stderr:
                    if stop_event.is_set():
                        break
                    stderr_queue.put(line)
            except (ValueError, OSError) as e:
                # Pipe closed or process terminated
                logger.debug("Stderr reader stopped: %s", e)
            finally:
                stderr_queue.put(None)

        reader_thread = threading.Thread(target=read_stderr, daemon=True)
        reader_thread.start()

        timed_out = False
        stderr_closed = False
        start_time = time.monotonic()

        while True:
            if self._timeout is not None:
                if time.monotonic() - start_time >= self._timeout:
                    timed_out = True
                    break

            if process.poll() is not None:
                break

            if stderr_closed:
                # stderr hit EOF but the process is still running
                try:
                    process.wait(timeout=self.POLL_INTERVAL)
                except subprocess.TimeoutExpired:
                    pass
                continue

            try:
                line = stderr_queue.get(timeout=self.POLL_INTERVAL)
            except queue.Empty:
                continue
            if line is None:
                stderr_closed = True
                continue
            stderr_output.append(line)

        if timed_out:
            logger.warning("ffmpeg timed out after %s seconds", self._timeout)
            stop_event.set()
            process.kill()
            if process.stderr:
                try:
                    process.stderr.close()
                except OSError:  # nosec B110 - process already killed
                    pass
            process.wait()
            reader_thread.join(timeout=2.0)
            return -1, stderr_output, True

        # Process exited; let the reader hit EOF on its own
        reader_thread.join(timeout=self.STDERR_DRAIN_TIMEOUT)
        while True:
            try:
                line = stderr_queue.get_nowait()
            except queue.Empty:
                break
            if line is None:
                break
            stderr_output.append(line)

        process.wait()
        return process.returncode, stderr_output, False

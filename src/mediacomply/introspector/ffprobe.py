"""FFprobe-based implementation of the StreamProbe protocol."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - only for TimeoutExpired
from pathlib import Path

from mediacomply.core.subprocess_utils import run_tool
from mediacomply.domain.enums import ProbeErrorKind
from mediacomply.domain.exceptions import MissingToolError, ProbeError
from mediacomply.domain.models import StreamProbeResult
from mediacomply.introspector.parsers import parse_audio_codecs, parse_video_stream
from mediacomply.tools.locator import ToolLocator

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60

# Entries requested from ffprobe for each query
VIDEO_ENTRIES = "stream=codec_name,profile,pix_fmt"
AUDIO_ENTRIES = "stream=codec_name"


class FFprobeStreamProbe:
    """ffprobe-based implementation of StreamProbe.

    Runs two ffprobe queries per file: one for the first video stream and one
    for every audio stream. No existence check is done up front; whatever
    ffprobe reports for an unreachable path surfaces as TOOL_FAILED.
    """

    def __init__(
        self,
        locator: ToolLocator,
        timeout: int = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the probe.

        Args:
            locator: Resolves the ffprobe executable.
            timeout: Seconds allowed per ffprobe invocation.
        """
        self._locator = locator
        self._timeout = timeout

    def _ffprobe_path(self, path: Path) -> Path:
        try:
            return self._locator.require("ffprobe")
        except MissingToolError as e:
            raise ProbeError(ProbeErrorKind.TOOL_MISSING, path, str(e)) from e

    def _query(self, path: Path, selector: str, entries: str) -> str:
        """Run one ffprobe query and return its stdout.

        Raises:
            ProbeError: TOOL_MISSING or TOOL_FAILED.
        """
        ffprobe = self._ffprobe_path(path)
        args: list[str | Path] = [
            ffprobe,
            "-v",
            "error",
            "-select_streams",
            selector,
            "-show_entries",
            entries,
            "-of",
            "json",
            path,
        ]
        try:
            run = run_tool(args, timeout=self._timeout)
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                ProbeErrorKind.TOOL_FAILED,
                path,
                f"ffprobe timed out for {path} after {e.timeout}s",
            ) from e
        except OSError as e:
            # Executable vanished or is not runnable
            raise ProbeError(
                ProbeErrorKind.TOOL_MISSING,
                path,
                f"Could not execute ffprobe ({ffprobe}): {e}",
            ) from e

        if not run.ok:
            detail = run.last_error_line()
            raise ProbeError(
                ProbeErrorKind.TOOL_FAILED,
                path,
                f"ffprobe failed for {path} (exit {run.returncode})"
                + (f": {detail}" if detail else ""),
            )
        return run.stdout

    def probe(self, path: Path) -> StreamProbeResult:
        """Extract video and audio stream metadata.

        Args:
            path: Path to the media file.

        Returns:
            StreamProbeResult for the file.

        Raises:
            ProbeError: If compliance cannot be determined.
        """
        video_out = self._query(path, "v:0", VIDEO_ENTRIES)
        codec, profile, pix_fmt = parse_video_stream(path, video_out)

        audio_out = self._query(path, "a", AUDIO_ENTRIES)
        audio_codecs = parse_audio_codecs(path, audio_out)

        result = StreamProbeResult(
            video_codec=codec,
            video_profile=profile,
            pix_fmt=pix_fmt,
            audio_codecs=audio_codecs,
        )
        logger.debug(
            "Probed %s",
            path.name,
            extra={
                "video_codec": codec,
                "video_profile": profile,
                "pix_fmt": pix_fmt,
                "audio_codecs": ",".join(audio_codecs),
            },
        )
        return result

"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON text into stream metadata.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import json
import logging
from pathlib import Path
from typing import Any

from mediacomply.domain.enums import ProbeErrorKind
from mediacomply.domain.exceptions import ProbeError

logger = logging.getLogger(__name__)


def sanitize_string(value: Any) -> str:
    """Normalize an ffprobe field to a stripped string.

    Missing or non-string values become the empty string; invalid UTF-8 is
    replaced.

    Args:
        value: Raw field value from ffprobe JSON.

    Returns:
        Sanitized string.
    """
    if value is None:
        return ""
    text = str(value).strip()
    return text.encode("utf-8", errors="replace").decode("utf-8")


def parse_stream_list(path: Path, stdout: str) -> list[dict[str, Any]]:
    """Parse ffprobe JSON output and return its "streams" list.

    Args:
        path: File that was probed (for error messages).
        stdout: Raw ffprobe stdout.

    Returns:
        List of stream dictionaries (possibly empty).

    Raises:
        ProbeError: MALFORMED_OUTPUT if output is empty, not JSON, or has no
            "streams" list.
    """
    if not stdout or not stdout.strip():
        raise ProbeError(
            ProbeErrorKind.MALFORMED_OUTPUT,
            path,
            f"ffprobe returned no output for {path}",
        )

    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(
            ProbeErrorKind.MALFORMED_OUTPUT,
            path,
            f"Invalid ffprobe output for {path}: {e}",
        ) from e

    if not isinstance(data, dict):
        raise ProbeError(
            ProbeErrorKind.MALFORMED_OUTPUT,
            path,
            f"Unexpected ffprobe output for {path}: expected a JSON object",
        )

    # ffprobe omits the key entirely when no stream matches the selector
    streams = data.get("streams", [])
    if not isinstance(streams, list):
        raise ProbeError(
            ProbeErrorKind.MALFORMED_OUTPUT,
            path,
            f"Missing 'streams' list in ffprobe output for {path}",
        )

    return [s for s in streams if isinstance(s, dict)]


def parse_video_stream(path: Path, stdout: str) -> tuple[str, str, str]:
    """Extract codec, profile and pixel format of the first video stream.

    Args:
        path: File that was probed.
        stdout: ffprobe JSON output of the video stream query.

    Returns:
        Tuple of (codec_name, profile, pix_fmt). Missing fields are "".

    Raises:
        ProbeError: MALFORMED_OUTPUT or NO_VIDEO_STREAM.
    """
    streams = parse_stream_list(path, stdout)
    if not streams:
        raise ProbeError(
            ProbeErrorKind.NO_VIDEO_STREAM,
            path,
            f"No video stream found in {path}",
        )

    video = streams[0]
    codec = sanitize_string(video.get("codec_name"))
    if not codec:
        raise ProbeError(
            ProbeErrorKind.MALFORMED_OUTPUT,
            path,
            f"Video stream without codec_name in ffprobe output for {path}",
        )

    profile = sanitize_string(video.get("profile"))
    pix_fmt = sanitize_string(video.get("pix_fmt"))
    if not profile or not pix_fmt:
        logger.debug(
            "Video stream is missing profile or pix_fmt: %s",
            path,
            extra={"profile": profile, "pix_fmt": pix_fmt},
        )
    return codec, profile, pix_fmt


def parse_audio_codecs(path: Path, stdout: str) -> tuple[str, ...]:
    """Extract the codec names of all audio streams in stream order.

    Args:
        path: File that was probed.
        stdout: ffprobe JSON output of the audio stream query.

    Returns:
        Tuple of codec names; empty if the file has no audio.

    Raises:
        ProbeError: MALFORMED_OUTPUT.
    """
    streams = parse_stream_list(path, stdout)
    codecs = []
    for stream in streams:
        codec = sanitize_string(stream.get("codec_name"))
        # Audio streams ffprobe cannot identify still count as audio
        codecs.append(codec or "unknown")
    return tuple(codecs)

"""Tests for FFprobeStreamProbe."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from helpers import ffprobe_json

from mediacomply.core.subprocess_utils import ToolRun
from mediacomply.domain.enums import ProbeErrorKind
from mediacomply.domain.exceptions import ProbeError
from mediacomply.introspector.ffprobe import FFprobeStreamProbe
from mediacomply.tools.locator import StaticToolLocator

FFPROBE = Path("/usr/bin/ffprobe")
SOURCE = Path("/media/Show/ep1.mkv")

VIDEO_OUT = ffprobe_json(
    {"codec_name": "hevc", "profile": "Main 10", "pix_fmt": "p010le"}
)
AUDIO_OUT = ffprobe_json({"codec_name": "aac"}, {"codec_name": "ac3"})


def _run(stdout: str, stderr: str = "", returncode: int = 0) -> ToolRun:
    return ToolRun(("ffprobe",), stdout, stderr, returncode)


@pytest.fixture
def probe() -> FFprobeStreamProbe:
    return FFprobeStreamProbe(StaticToolLocator({"ffprobe": FFPROBE}), timeout=30)


class TestFFprobeStreamProbe:
    """Tests for FFprobeStreamProbe.probe."""

    def test_successful_probe(self, probe: FFprobeStreamProbe) -> None:
        """Video and audio queries combine into one StreamProbeResult."""
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            side_effect=[_run(VIDEO_OUT), _run(AUDIO_OUT)],
        ) as mock_run:
            result = probe.probe(SOURCE)

        assert result.video_codec == "hevc"
        assert result.video_profile == "Main 10"
        assert result.pix_fmt == "p010le"
        assert result.audio_codecs == ("aac", "ac3")

        video_args = mock_run.call_args_list[0].args[0]
        audio_args = mock_run.call_args_list[1].args[0]
        assert video_args[0] == FFPROBE
        assert "v:0" in video_args
        assert "stream=codec_name,profile,pix_fmt" in video_args
        assert "a" in audio_args
        assert "stream=codec_name" in audio_args
        assert video_args[-1] == SOURCE
        assert mock_run.call_args_list[0].kwargs["timeout"] == 30

    def test_missing_tool(self) -> None:
        """An unresolvable ffprobe is TOOL_MISSING and nothing is executed."""
        probe = FFprobeStreamProbe(StaticToolLocator({"ffprobe": None}))
        with patch("mediacomply.introspector.ffprobe.run_tool") as mock_run:
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)

        assert exc_info.value.kind == ProbeErrorKind.TOOL_MISSING
        mock_run.assert_not_called()

    def test_executable_not_runnable(self, probe: FFprobeStreamProbe) -> None:
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            side_effect=FileNotFoundError("gone"),
        ):
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)
        assert exc_info.value.kind == ProbeErrorKind.TOOL_MISSING

    def test_nonzero_exit(self, probe: FFprobeStreamProbe) -> None:
        """A failing ffprobe is TOOL_FAILED with its last stderr line."""
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            return_value=_run("", "line1\nNo such file or directory\n", 1),
        ):
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)

        assert exc_info.value.kind == ProbeErrorKind.TOOL_FAILED
        assert "No such file or directory" in str(exc_info.value)

    def test_timeout(self, probe: FFprobeStreamProbe) -> None:
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            side_effect=subprocess.TimeoutExpired(cmd="ffprobe", timeout=30),
        ):
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)
        assert exc_info.value.kind == ProbeErrorKind.TOOL_FAILED

    def test_no_video_stream(self, probe: FFprobeStreamProbe) -> None:
        """The audio query is skipped once the file has no video."""
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            return_value=_run(ffprobe_json()),
        ) as mock_run:
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)

        assert exc_info.value.kind == ProbeErrorKind.NO_VIDEO_STREAM
        assert mock_run.call_count == 1

    def test_malformed_audio_output(self, probe: FFprobeStreamProbe) -> None:
        with patch(
            "mediacomply.introspector.ffprobe.run_tool",
            side_effect=[_run(VIDEO_OUT), _run("garbage")],
        ):
            with pytest.raises(ProbeError) as exc_info:
                probe.probe(SOURCE)
        assert exc_info.value.kind == ProbeErrorKind.MALFORMED_OUTPUT

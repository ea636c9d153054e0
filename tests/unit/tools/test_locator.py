"""Tests for tool resolution."""

import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from mediacomply.config.models import ToolPathsConfig
from mediacomply.domain.exceptions import MissingToolError
from mediacomply.tools.locator import (
    StaticToolLocator,
    ToolLocator,
    find_tool,
)


def _executable(path: Path) -> Path:
    path.write_text("#!/bin/sh\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestFindTool:
    def test_configured_path_wins(self, temp_dir: Path) -> None:
        tool = _executable(temp_dir / "ffprobe")
        with patch("mediacomply.tools.locator.shutil.which") as mock_which:
            assert find_tool("ffprobe", tool) == tool
        mock_which.assert_not_called()

    def test_falls_back_to_path(self, temp_dir: Path) -> None:
        with patch(
            "mediacomply.tools.locator.shutil.which", return_value="/usr/bin/ffprobe"
        ):
            assert find_tool("ffprobe", temp_dir / "missing") == Path(
                "/usr/bin/ffprobe"
            )

    def test_not_found(self) -> None:
        with patch("mediacomply.tools.locator.shutil.which", return_value=None):
            assert find_tool("ffprobe") is None


class TestToolLocator:
    """Tests for ToolLocator."""

    def test_from_config(self, temp_dir: Path) -> None:
        ffmpeg = _executable(temp_dir / "ffmpeg")
        locator = ToolLocator.from_config(ToolPathsConfig(ffmpeg=ffmpeg))
        assert locator.find("ffmpeg") == ffmpeg

    def test_require_missing_raises_with_hint(self) -> None:
        with patch("mediacomply.tools.locator.shutil.which", return_value=None):
            locator = ToolLocator()
            with pytest.raises(MissingToolError) as exc_info:
                locator.require("ffprobe")

        assert exc_info.value.tool_name == "ffprobe"
        assert "ffprobe" in str(exc_info.value)
        assert "MEDIACOMPLY_FFPROBE_PATH" in str(exc_info.value)

    def test_resolution_is_memoized(self) -> None:
        with patch(
            "mediacomply.tools.locator.shutil.which", return_value="/bin/ffmpeg"
        ) as mock_which:
            locator = ToolLocator()
            locator.find("ffmpeg")
            locator.find("ffmpeg")
        assert mock_which.call_count == 1

    def test_missing(self) -> None:
        locator = StaticToolLocator({"ffprobe": Path("/x/ffprobe"), "ffmpeg": None})
        assert locator.missing("ffprobe", "ffmpeg") == ["ffmpeg"]

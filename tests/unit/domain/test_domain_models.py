"""Tests for domain models and exceptions."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from mediacomply.domain.enums import ComplianceAction, ProbeErrorKind
from mediacomply.domain.exceptions import (
    ConfigError,
    EncoderConfigError,
    MediaComplyError,
    MissingToolError,
    ProbeError,
)
from mediacomply.domain.models import ComplianceDecision, MediaFile


class TestMediaFile:
    def test_from_path(self, temp_dir: Path) -> None:
        media = MediaFile.from_path(temp_dir / "Show" / "Ep1.AVI")
        assert media.path.is_absolute()
        assert media.extension == "avi"
        assert media.title == "Ep1"

    def test_immutable(self) -> None:
        media = MediaFile(Path("/m/a.mkv"), "mkv")
        with pytest.raises(FrozenInstanceError):
            media.extension = "mp4"


class TestComplianceDecision:
    def test_reason_joins_with_separator(self) -> None:
        decision = ComplianceDecision(ComplianceAction.CONVERT, ("a", "b"))
        assert decision.reason == "a; b"
        assert decision.needs_conversion


class TestExceptions:
    def test_hierarchy(self) -> None:
        error = ProbeError(
            ProbeErrorKind.NO_VIDEO_STREAM, Path("/m/a.mka"), "no video stream"
        )
        assert isinstance(error, MediaComplyError)
        assert error.kind == ProbeErrorKind.NO_VIDEO_STREAM
        assert error.path == Path("/m/a.mka")
        assert isinstance(EncoderConfigError("bad"), MediaComplyError)
        assert isinstance(ConfigError("bad"), MediaComplyError)

    def test_missing_tool_message(self) -> None:
        error = MissingToolError("ffmpeg", "Install it")
        assert str(error) == "Required tool not available: ffmpeg. Install it"
        assert str(MissingToolError("ffmpeg")) == "Required tool not available: ffmpeg"

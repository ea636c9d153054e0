"""Tests for build_logging_config."""

from pathlib import Path

import pytest

from mediacomply.config.logging_factory import build_logging_config
from mediacomply.config.models import LoggingConfig


class TestBuildLoggingConfig:
    def test_no_overrides_keeps_base(self) -> None:
        base = LoggingConfig(level="warning", format="json", max_bytes=1024)
        assert build_logging_config(base) == base

    def test_overrides_applied(self) -> None:
        base = LoggingConfig()
        result = build_logging_config(
            base, level="debug", file=Path("/tmp/x.log"), format="json"
        )
        assert result.level == "debug"
        assert result.file == Path("/tmp/x.log")
        assert result.format == "json"
        assert result.backup_count == base.backup_count

    def test_invalid_override(self) -> None:
        with pytest.raises(ValueError):
            build_logging_config(LoggingConfig(), level="loud")

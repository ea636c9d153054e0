"""Tests for the audit and convert CLI commands."""

import csv
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from helpers import LEGACY_PROBE, FakeEncodeRunner, FakeProbe

from mediacomply.cli import main
from mediacomply.cli.exit_codes import ExitCode
from mediacomply.config.models import AppConfig
from mediacomply.domain.enums import ProbeErrorKind
from mediacomply.tools.locator import StaticToolLocator

TOOLS = {"ffprobe": Path("/usr/bin/ffprobe"), "ffmpeg": Path("/usr/bin/ffmpeg")}


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from replacing the root logger's handlers."""
    with patch("mediacomply.logging.configure_logging"):
        yield


def _obj(probe=None, runner=None, tools=None) -> dict:
    return {
        "config": AppConfig(),
        "locator": StaticToolLocator(tools if tools is not None else TOOLS),
        "probe": probe or FakeProbe({}, default=LEGACY_PROBE),
        "encode_runner": runner or FakeEncodeRunner(succeed={"libx265"}),
    }


def _read_rows(path: Path) -> list[dict]:
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


# =============================================================================
# audit
# =============================================================================


class TestAuditCommand:
    def test_writes_report(self, media_root: Path, temp_dir: Path) -> None:
        report = temp_dir / "audit.csv"
        result = CliRunner().invoke(
            main, ["audit", str(media_root), "--report", str(report)], obj=_obj()
        )

        assert result.exit_code == 0, result.output
        assert "Auditing 1 file(s)" in result.output
        assert f"Report written to {report}" in result.output
        rows = _read_rows(report)
        assert len(rows) == 1
        assert rows[0]["Action"] == "Convert"
        assert rows[0]["VideoCodec"] == "mpeg4"
        assert rows[0]["AudioCodecs"] == "mp3"
        # Audit never modifies files
        assert (media_root / "Show" / "ep1.avi").read_bytes() == (
            b"original avi content"
        )

    def test_probe_error_row(self, media_root: Path, temp_dir: Path) -> None:
        report = temp_dir / "audit.csv"
        probe = FakeProbe({"ep1.avi": ProbeErrorKind.MALFORMED_OUTPUT})
        result = CliRunner().invoke(
            main,
            ["audit", str(media_root), "--report", str(report), "--workers", "2"],
            obj=_obj(probe=probe),
        )

        assert result.exit_code == 0, result.output
        rows = _read_rows(report)
        assert rows[0]["Action"] == "Error"
        assert "malformed_output" in rows[0]["Reason"]

    def test_missing_ffprobe(self, media_root: Path, temp_dir: Path) -> None:
        result = CliRunner().invoke(
            main,
            ["audit", str(media_root), "--report", str(temp_dir / "a.csv")],
            obj=_obj(tools={"ffprobe": None, "ffmpeg": None}),
        )

        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE
        assert "ffprobe" in result.output

    def test_missing_root(self, temp_dir: Path) -> None:
        result = CliRunner().invoke(
            main, ["audit", str(temp_dir / "nope")], obj=_obj()
        )

        assert result.exit_code == ExitCode.TARGET_NOT_FOUND
        assert "Path not found" in result.output


# =============================================================================
# convert
# =============================================================================


class TestConvertCommand:
    def test_requires_backup_root(self, media_root: Path) -> None:
        result = CliRunner().invoke(main, ["convert", str(media_root)], obj=_obj())

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "--backup-root is required" in result.output

    def test_backup_root_must_differ(self, media_root: Path) -> None:
        result = CliRunner().invoke(
            main,
            ["convert", str(media_root), "--backup-root", str(media_root)],
            obj=_obj(),
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_declined_prompt_changes_nothing(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        runner = FakeEncodeRunner(succeed={"libx265"})
        result = CliRunner().invoke(
            main,
            [
                "convert",
                str(media_root),
                "--backup-root",
                str(backup_root),
                "--summary",
                str(temp_dir / "summary.csv"),
            ],
            obj=_obj(runner=runner),
            input="n\n",
        )

        assert result.exit_code == ExitCode.USER_ABORTED
        assert "Aborted." in result.output
        assert runner.calls == []
        assert (media_root / "Show" / "ep1.avi").exists()
        assert not backup_root.exists()

    def test_converts_and_swaps(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        summary = temp_dir / "summary.csv"
        result = CliRunner().invoke(
            main,
            [
                "convert",
                str(media_root),
                "--backup-root",
                str(backup_root),
                "--summary",
                str(summary),
                "--yes",
            ],
            obj=_obj(),
        )

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert (backup_root / "Show" / "ep1.avi").read_bytes() == (
            b"original avi content"
        )
        assert (media_root / "Show" / "ep1.mkv").read_bytes() == b"encoded"
        assert not (media_root / "Show" / "ep1.avi").exists()
        rows = _read_rows(summary)
        assert rows[0]["Status"] == "Success"
        assert rows[0]["Path"].endswith("ep1.mkv")
        assert "libx265" in rows[0]["Reason"]

    def test_single_file_root(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        source = media_root / "Show" / "ep1.avi"
        result = CliRunner().invoke(
            main,
            [
                "convert",
                str(source),
                "--backup-root",
                str(backup_root),
                "--summary",
                str(temp_dir / "summary.csv"),
                "--yes",
            ],
            obj=_obj(),
        )

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert (backup_root / "ep1.avi").read_bytes() == b"original avi content"
        assert (media_root / "Show" / "ep1.mkv").read_bytes() == b"encoded"

    def test_all_encoders_fail(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        summary = temp_dir / "summary.csv"
        result = CliRunner().invoke(
            main,
            [
                "convert",
                str(media_root),
                "--backup-root",
                str(backup_root),
                "--summary",
                str(summary),
                "-y",
            ],
            obj=_obj(runner=FakeEncodeRunner(succeed=set())),
        )

        assert result.exit_code == ExitCode.CONVERSION_FAILED
        assert (media_root / "Show" / "ep1.avi").read_bytes() == (
            b"original avi content"
        )
        assert sorted(p.name for p in (media_root / "Show").iterdir()) == ["ep1.avi"]
        assert _read_rows(summary)[0]["Status"] == "Fail"

    def test_promote_failure_exits_inconsistent(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        summary = temp_dir / "summary.csv"
        real_move = shutil.move
        calls: list[str] = []

        def flaky_move(src: str, dst: str):
            calls.append(src)
            if len(calls) == 2:
                raise OSError("device went away")
            return real_move(src, dst)

        with patch("mediacomply.executor.swap.shutil.move", side_effect=flaky_move):
            result = CliRunner().invoke(
                main,
                [
                    "convert",
                    str(media_root),
                    "--backup-root",
                    str(backup_root),
                    "--summary",
                    str(summary),
                    "-y",
                ],
                obj=_obj(),
            )

        assert result.exit_code == ExitCode.INCONSISTENT_STATE
        assert "Manual recovery required" in result.output
        assert _read_rows(summary)[0]["Status"] == "Inconsistent"
        assert (backup_root / "Show" / "ep1.avi").exists()

    def test_dry_run(self, media_root: Path, temp_dir: Path) -> None:
        summary = temp_dir / "summary.csv"
        runner = FakeEncodeRunner(succeed={"libx265"})
        result = CliRunner().invoke(
            main,
            ["convert", str(media_root), "--dry-run", "--summary", str(summary)],
            obj=_obj(runner=runner, tools={"ffprobe": TOOLS["ffprobe"]}),
        )

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert runner.calls == []
        assert (media_root / "Show" / "ep1.avi").exists()
        rows = _read_rows(summary)
        assert rows[0]["Status"] == "DryRun"

    def test_invalid_encoders_file(
        self, media_root: Path, backup_root: Path, temp_dir: Path
    ) -> None:
        encoders = temp_dir / "encoders.yaml"
        encoders.write_text("encoders: [\n", encoding="utf-8")
        result = CliRunner().invoke(
            main,
            [
                "convert",
                str(media_root),
                "--backup-root",
                str(backup_root),
                "--encoders",
                str(encoders),
            ],
            obj=_obj(),
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Invalid YAML" in result.output


class TestMainGroup:
    def test_missing_config_file(self, media_root: Path, temp_dir: Path) -> None:
        result = CliRunner().invoke(
            main,
            ["--config", str(temp_dir / "missing.toml"), "audit", str(media_root)],
            obj={},
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Config file not found" in result.output

    def test_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "audit" in result.output
        assert "convert" in result.output

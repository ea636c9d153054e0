"""Helpers shared by the audit and convert commands.

Subcommands read their collaborators from the click context object. Tests
can pre-populate "config", "locator", "probe" or "encode_runner" there.
"""

from __future__ import annotations

from pathlib import Path

import click

from mediacomply.cli.exit_codes import ExitCode
from mediacomply.cli.output import error_exit
from mediacomply.config.models import AppConfig
from mediacomply.executor.ffmpeg_runner import FFmpegEncodeRunner
from mediacomply.executor.interface import EncodeRunner
from mediacomply.introspector.ffprobe import FFprobeStreamProbe
from mediacomply.introspector.interface import StreamProbe
from mediacomply.tools.locator import INSTALL_HINTS, ToolLocator


def get_app_config(ctx: click.Context) -> AppConfig:
    return ctx.obj["config"]


def get_locator(ctx: click.Context) -> ToolLocator:
    locator = ctx.obj.get("locator")
    if locator is None:
        locator = ToolLocator.from_config(get_app_config(ctx).tools)
        ctx.obj["locator"] = locator
    return locator


def require_tools(locator: ToolLocator, *names: str) -> None:
    """Exit with TOOL_NOT_AVAILABLE unless every named tool resolves."""
    missing = locator.missing(*names)
    if missing:
        hints = "\n".join(INSTALL_HINTS.get(name, "") for name in missing)
        error_exit(
            f"Required tool(s) not available: {', '.join(missing)}\n{hints}",
            ExitCode.TOOL_NOT_AVAILABLE,
        )


def get_probe(ctx: click.Context, locator: ToolLocator) -> StreamProbe:
    probe = ctx.obj.get("probe")
    if probe is None:
        timeout = get_app_config(ctx).encoding.probe_timeout_seconds
        probe = FFprobeStreamProbe(locator, timeout=timeout)
    return probe


def get_encode_runner(ctx: click.Context, locator: ToolLocator) -> EncodeRunner:
    runner = ctx.obj.get("encode_runner")
    if runner is None:
        timeout = get_app_config(ctx).encoding.encode_timeout_seconds
        runner = FFmpegEncodeRunner(locator, timeout=timeout)
    return runner


def resolve_target(path: Path) -> Path:
    """Resolve a media root, exiting with TARGET_NOT_FOUND if missing."""
    resolved = path.expanduser().resolve()
    if not resolved.exists():
        error_exit(f"Path not found: {path}", ExitCode.TARGET_NOT_FOUND)
    return resolved

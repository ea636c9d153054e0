"""Audit command: classify media files without modifying them."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mediacomply.cli.common import (
    get_locator,
    get_probe,
    require_tools,
    resolve_target,
)
from mediacomply.cli.exit_codes import ExitCode
from mediacomply.cli.output import error_exit, format_counts
from mediacomply.domain.enums import ComplianceAction
from mediacomply.pipeline.processor import audit_files
from mediacomply.reports.csv_reports import DEFAULT_AUDIT_REPORT, write_audit_report
from mediacomply.scanner.discovery import discover_candidates

logger = logging.getLogger(__name__)


@click.command("audit")
@click.argument("root", type=click.Path(path_type=Path))
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Audit CSV path (default: ./{DEFAULT_AUDIT_REPORT}).",
)
@click.option(
    "--recursive/--no-recursive",
    default=True,
    show_default=True,
    help="Search subdirectories.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1, max=16),
    default=1,
    show_default=True,
    help="Number of files probed concurrently.",
)
@click.pass_context
def audit_command(
    ctx: click.Context,
    root: Path,
    report_path: Path | None,
    recursive: bool,
    workers: int,
) -> None:
    """Report which files under ROOT are compliant.

    Writes one CSV row per file with its stream metadata and the decided
    action (Keep, Convert or Error). No file is modified.
    """
    media_root = resolve_target(root)
    locator = get_locator(ctx)
    require_tools(locator, "ffprobe")

    files = discover_candidates(media_root, recursive=recursive)
    click.echo(f"Auditing {len(files)} file(s) under {media_root}")

    probe = get_probe(ctx, locator)
    try:
        entries = audit_files(probe, files, workers=workers)
    except KeyboardInterrupt:
        error_exit("Interrupted", ExitCode.INTERRUPTED)

    output = report_path or Path.cwd() / DEFAULT_AUDIT_REPORT
    try:
        write_audit_report(entries, output)
    except OSError as e:
        error_exit(f"Cannot write audit report {output}: {e}", ExitCode.GENERAL_ERROR)

    counts = {
        action.value.casefold(): sum(1 for e in entries if e.decision.action == action)
        for action in ComplianceAction
    }
    click.echo(f"Audit complete: {format_counts(counts)}")
    click.echo(f"Report written to {output}")
    logger.info("Audit report written", extra={"report": str(output), **counts})

"""Convert command: re-encode non-compliant files and swap them into place."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from mediacomply.cli.common import (
    get_app_config,
    get_encode_runner,
    get_locator,
    get_probe,
    require_tools,
    resolve_target,
)
from mediacomply.cli.exit_codes import ExitCode
from mediacomply.cli.output import error_exit, format_counts
from mediacomply.domain.enums import FailurePolicy, OutcomeStatus
from mediacomply.domain.exceptions import EncoderConfigError
from mediacomply.executor.encoders import DEFAULT_ENCODER_CHAIN, load_encoder_chain
from mediacomply.executor.fallback import EncoderFallbackChain
from mediacomply.pipeline.processor import ConversionPipeline, RunSummary
from mediacomply.pipeline.recorder import OutcomeCollector
from mediacomply.reports.csv_reports import (
    DEFAULT_CONVERSION_SUMMARY,
    write_conversion_summary,
)
from mediacomply.scanner.discovery import discover_candidates

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    OutcomeStatus.SUCCESS: "converted",
    OutcomeStatus.KEEP: "compliant",
    OutcomeStatus.DRY_RUN: "would convert",
    OutcomeStatus.FAIL: "failed",
    OutcomeStatus.ERROR: "probe errors",
    OutcomeStatus.INCONSISTENT: "inconsistent",
}


def _exit_code_for(summary: RunSummary) -> ExitCode:
    if summary.has_inconsistent:
        return ExitCode.INCONSISTENT_STATE
    if summary.has_failures:
        return ExitCode.CONVERSION_FAILED
    return ExitCode.SUCCESS


def _write_summary(collector: OutcomeCollector, output: Path) -> None:
    try:
        write_conversion_summary(collector.outcomes, output)
    except OSError as e:
        error_exit(f"Cannot write summary {output}: {e}", ExitCode.GENERAL_ERROR)
    click.echo(f"Summary written to {output}")


@click.command("convert")
@click.argument("root", type=click.Path(path_type=Path))
@click.option(
    "--backup-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory receiving originals, mirroring their path under ROOT. "
    "Required unless --dry-run.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Classify and report only; never encode or move files.",
)
@click.option(
    "--recursive/--no-recursive",
    default=True,
    show_default=True,
    help="Search subdirectories.",
)
@click.option(
    "--summary",
    "summary_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Conversion summary CSV path (default: ./{DEFAULT_CONVERSION_SUMMARY}).",
)
@click.option(
    "--continue-on-failure",
    is_flag=True,
    default=False,
    help="Keep going after a file fails instead of stopping the run.",
)
@click.option(
    "--yes",
    "-y",
    "assume_yes",
    is_flag=True,
    default=False,
    help="Do not ask for confirmation.",
)
@click.option(
    "--encoders",
    "encoders_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML file replacing the default encoder chain.",
)
@click.pass_context
def convert_command(
    ctx: click.Context,
    root: Path,
    backup_root: Path | None,
    dry_run: bool,
    recursive: bool,
    summary_path: Path | None,
    continue_on_failure: bool,
    assume_yes: bool,
    encoders_file: Path | None,
) -> None:
    """Convert non-compliant files under ROOT to HEVC Main 10 / AAC.

    Each converted file replaces the original as <name>.mkv; the original is
    moved to BACKUP_ROOT under the same relative path. Encoders are tried in
    priority order (NVENC, AMF, libx265) until one succeeds.
    """
    config = get_app_config(ctx)
    media_root = resolve_target(root)
    # A single file as ROOT mirrors into the backup root by its directory
    mirror_root = media_root.parent if media_root.is_file() else media_root

    if backup_root is not None:
        backup_root = backup_root.expanduser().resolve()
        if backup_root == mirror_root:
            error_exit(
                "--backup-root must differ from the media root", ExitCode.CONFIG_ERROR
            )
    elif not dry_run:
        error_exit("--backup-root is required unless --dry-run", ExitCode.CONFIG_ERROR)

    chain_file = encoders_file or config.encoding.encoders_file
    try:
        profiles = (
            load_encoder_chain(chain_file) if chain_file else DEFAULT_ENCODER_CHAIN
        )
    except EncoderConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    locator = get_locator(ctx)
    require_tools(locator, "ffprobe")
    if not dry_run:
        require_tools(locator, "ffmpeg")

    files = discover_candidates(
        media_root, recursive=recursive, exclude_under=backup_root
    )
    click.echo(f"Found {len(files)} candidate file(s) under {media_root}")

    if files and not dry_run and not assume_yes:
        if not click.confirm(
            f"Convert non-compliant files and move originals to {backup_root}?",
            default=False,
        ):
            click.echo("Aborted.")
            sys.exit(int(ExitCode.USER_ABORTED))

    policy = (
        FailurePolicy.CONTINUE if continue_on_failure else config.behavior.on_failure
    )
    collector = OutcomeCollector()
    pipeline = ConversionPipeline(
        probe=get_probe(ctx, locator),
        chain=EncoderFallbackChain(profiles, get_encode_runner(ctx, locator)),
        recorder=collector,
        media_root=mirror_root,
        backup_root=backup_root,
        dry_run=dry_run,
        failure_policy=policy,
    )

    output = summary_path or Path.cwd() / DEFAULT_CONVERSION_SUMMARY
    try:
        summary = pipeline.run(files)
    except KeyboardInterrupt:
        _write_summary(collector, output)
        error_exit("Interrupted", ExitCode.INTERRUPTED)

    _write_summary(collector, output)

    counts = {label: summary.count(status) for status, label in _STATUS_LABELS.items()}
    click.echo(f"Done: {format_counts(counts)}")
    if summary.aborted:
        click.echo(
            f"Run stopped early: {summary.abort_reason} "
            f"({summary.skipped} file(s) not processed)",
            err=True,
        )
    if summary.has_inconsistent:
        click.echo(
            "Manual recovery required: see Inconsistent rows in the summary. "
            "Originals are in the backup root; converted output is still at "
            "its in-progress path.",
            err=True,
        )

    sys.exit(int(_exit_code_for(summary)))

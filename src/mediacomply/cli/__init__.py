"""CLI module for mediacomply."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from mediacomply.cli.exit_codes import ExitCode
from mediacomply.cli.output import error_exit
from mediacomply.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _configure_logging(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the loaded config plus CLI overrides."""
    from mediacomply.config.logging_factory import build_logging_config
    from mediacomply.logging import configure_logging

    base = ctx.obj["config"].logging
    try:
        logging_config = build_logging_config(
            base,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        error_exit(f"Invalid logging configuration: {e}", ExitCode.CONFIG_ERROR)
    configure_logging(logging_config)


def _log_startup_settings(config_path: Path | None) -> None:
    """Log where configuration came from."""
    from mediacomply.config.loader import get_data_dir, get_default_config_path

    data_dir_source = "env" if os.environ.get("MEDIACOMPLY_DATA_DIR") else "default"
    if config_path is not None:
        config_source = "cli"
    elif os.environ.get("MEDIACOMPLY_CONFIG_PATH"):
        config_source = "env"
    else:
        config_source = "default"

    effective = config_path or get_default_config_path()
    logger.info(
        "mediacomply starting: data_dir=%s (%s), config=%s (%s)",
        str(get_data_dir()).replace(str(Path.home()), "~"),
        data_dir_source,
        str(effective).replace(str(Path.home()), "~"),
        config_source,
    )


@click.group()
@click.version_option(package_name="mediacomply")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.mediacomply/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """mediacomply - Audit and convert media to HEVC Main 10 / AAC."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        from mediacomply.config import get_config

        if config_path is not None and not config_path.exists():
            error_exit(f"Config file not found: {config_path}", ExitCode.CONFIG_ERROR)
        try:
            ctx.obj["config"] = get_config(
                config_path=config_path, strict=config_path is not None
            )
        except ConfigError as e:
            error_exit(str(e), ExitCode.CONFIG_ERROR)

    _configure_logging(ctx, log_level, log_file, log_json)
    _log_startup_settings(config_path)


# Defer import to avoid circular dependency
def _register_commands():
    from mediacomply.cli.audit import audit_command
    from mediacomply.cli.convert import convert_command

    main.add_command(audit_command)
    main.add_command(convert_command)


_register_commands()

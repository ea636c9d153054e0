"""Shared CLI output helpers."""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from mediacomply.cli.exit_codes import ExitCode


def error_exit(message: str, code: ExitCode | int) -> NoReturn:
    """Print an error to stderr and exit.

    Note:
        This function never returns; it always calls sys.exit().
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def format_counts(counts: dict[str, int]) -> str:
    """Render non-zero counts as "2 keep, 1 convert"."""
    parts = [f"{n} {label}" for label, n in counts.items() if n]
    return ", ".join(parts) if parts else "nothing to report"

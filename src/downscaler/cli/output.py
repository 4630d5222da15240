"""CLI output helpers for errors and the run summary."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, NoReturn

import click

if TYPE_CHECKING:
    from downscaler.walker.models import WalkResult

    from .exit_codes import ExitCode


def error_exit(message: str, code: ExitCode | int) -> NoReturn:
    """Print an error message to stderr and exit with code.

    Note:
        This function never returns; it always calls sys.exit().
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def format_summary(result: WalkResult, *, dry_run: bool = False) -> str:
    """Format the one-line run summary."""
    done = (
        f"{result.files_planned} planned"
        if dry_run
        else f"{result.files_transcoded} transcoded"
    )
    summary = (
        f"{result.files_found} files: {done}, {result.files_skipped} skipped, "
        f"{result.files_failed} failed in {result.elapsed_seconds:.1f}s"
    )
    if result.aborted:
        summary += " (aborted)"
    return summary

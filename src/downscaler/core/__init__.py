"""Core utilities shared across downscaler."""

from downscaler.core.subprocess_utils import format_command, run_command

__all__ = [
    "format_command",
    "run_command",
]

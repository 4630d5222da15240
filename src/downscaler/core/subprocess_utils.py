"""Subprocess wrapper for running ffmpeg.

Output is captured as text with undecodable bytes replaced, and every run
is logged with its duration.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def format_command(args: list[str | Path]) -> str:
    """Render a command for log output."""
    return " ".join(str(arg) for arg in args)


def run_command(args: list[str | Path]) -> tuple[str, str, int]:
    """Run an external command to completion and capture its output.

    Args:
        args: Command and arguments. Path objects are converted to strings.

    Returns:
        Tuple of (stdout, stderr, returncode). A negative returncode means
        the process was terminated by that signal.

    Raises:
        OSError: If the executable cannot be started.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name

    logger.debug(
        "Executing command: %s",
        format_command(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    result = subprocess.run(  # nosec B603 - args built by build_ffmpeg_command
        str_args, capture_output=True, text=True, errors="replace"
    )
    elapsed = time.monotonic() - start_time

    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode

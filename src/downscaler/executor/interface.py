"""Encoder protocol and tool availability utilities."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from downscaler.exceptions import ToolNotFoundError


class Encoder(Protocol):
    """Protocol for the component that transcodes one file.

    The tree walker only depends on this protocol, so tests can substitute
    a fake encoder.
    """

    def transcode(self, source: Path, destination: Path, height: int | None) -> None:
        """Transcode source into destination.

        Args:
            source: Input video file.
            destination: Final output path (its directory already exists).
            height: Maximum output height, or None for no scaling.

        Raises:
            EncodeError: If the file could not be transcoded.
        """
        ...

    def describe(self, source: Path, destination: Path, height: int | None) -> str:
        """Return the command that transcode() would run, for dry runs."""
        ...


def require_tool(name: str, configured: Path | None = None) -> Path:
    """Resolve an external tool, preferring an explicitly configured path.

    Args:
        name: Executable name (e.g. "ffmpeg").
        configured: Path from config file or environment, if any.

    Returns:
        Path to the executable.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    if configured is not None:
        if configured.is_file():
            return configured
        raise ToolNotFoundError(name)

    found = shutil.which(name)
    if found is None:
        raise ToolNotFoundError(name)
    return Path(found)

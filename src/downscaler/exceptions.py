"""Exception hierarchy for downscaler.

Every error carries the path (or CLI value) involved so the top-level log
output is actionable on its own.
"""

from __future__ import annotations

from pathlib import Path


class DownscalerError(Exception):
    """Base class for all downscaler errors."""

    pass


class ConfigError(DownscalerError):
    """Raised for malformed --override/--scale values or config files."""

    def __init__(self, message: str, value: str | None = None) -> None:
        self.message = message
        self.value = value
        super().__init__(message)


class TraversalError(DownscalerError):
    """Raised when a directory under the source root cannot be listed."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class PathError(TraversalError):
    """Raised when an entry's path relative to the source root is unusable.

    For example a path that resolves outside the source root.
    """

    pass


class EncodeError(DownscalerError):
    """Raised when the encoder fails for a single file."""

    def __init__(
        self,
        message: str,
        path: Path,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            path: Source file being encoded.
            returncode: Encoder exit status, None if it never ran or was
                killed by a signal.
            stderr: Tail of the encoder's stderr, if captured.
        """
        self.path = path
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{message}: {path}")


class ToolNotFoundError(DownscalerError):
    """Raised when a required external tool is not available."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"Required tool '{tool}' not found. Install it or set "
            f"DOWNSCALER_{tool.upper()}_PATH / [tools] {tool} in the config file."
        )

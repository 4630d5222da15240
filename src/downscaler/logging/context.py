"""Per-file context for structured logging.

While a file is being processed its path relative to the source root is
kept in a context variable and injected into every log record.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


def get_file_context() -> str | None:
    """Get the relative path of the file currently being processed."""
    return _file_path.get()


@contextmanager
def file_context(relative_path: str) -> Generator[None, None, None]:
    """Context manager for per-file processing context.

    Example:
        with file_context("movies/kids/cartoon.mkv"):
            logger.info("Encoding")  # Tagged with [movies/kids/cartoon.mkv]
    """
    token = _file_path.set(relative_path)
    try:
        yield
    finally:
        _file_path.reset(token)


class FileContextFilter(logging.Filter):
    """Logging filter that injects the current file into log records.

    Adds ``file_path`` for JSON output and a ``file_tag`` like
    ``[movies/kids/cartoon.mkv] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        file_path = get_file_context()
        record.file_path = file_path
        record.file_tag = f"[{file_path}] " if file_path else ""
        return True

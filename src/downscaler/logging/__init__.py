"""Structured logging module for downscaler.

Provides configurable logging with JSON format support, file rotation and
per-file context tagging.
"""

from downscaler.logging.config import configure_logging
from downscaler.logging.context import (
    FileContextFilter,
    file_context,
    get_file_context,
)
from downscaler.logging.handlers import JSONFormatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "configure_logging",
    "file_context",
    "get_file_context",
]

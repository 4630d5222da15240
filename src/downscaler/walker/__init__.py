"""Source tree traversal and per-file transcode decisions."""

from downscaler.walker.models import (
    ErrorPolicy,
    FileOutcome,
    OutcomeStatus,
    WalkResult,
)
from downscaler.walker.orchestrator import TreeWalker

__all__ = [
    "ErrorPolicy",
    "FileOutcome",
    "OutcomeStatus",
    "TreeWalker",
    "WalkResult",
]

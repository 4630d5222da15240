"""Result types for tree walking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from downscaler.exceptions import EncodeError


class ErrorPolicy(Enum):
    """What the walker does when a single file fails to encode."""

    CONTINUE = "continue"  # log, record, move on to the next file
    ABORT = "abort"  # stop the walk and mark the result aborted


class OutcomeStatus(Enum):
    """What happened to one file."""

    TRANSCODED = "transcoded"
    PLANNED = "planned"  # dry run
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_EXTENSION = "skipped_extension"
    FAILED = "failed"


@dataclass(frozen=True)
class FileOutcome:
    """Result of processing one file under the source root."""

    relative_path: tuple[str, ...]
    status: OutcomeStatus
    source: Path
    destination: Path | None = None
    height: int | None = None
    error: EncodeError | None = None

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    @property
    def display_path(self) -> str:
        return "/".join(self.relative_path)


@dataclass
class WalkResult:
    """Summary of a walk over the source tree."""

    files_found: int = 0
    files_transcoded: int = 0
    files_planned: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    failures: list[FileOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    aborted: bool = False

    def record(self, outcome: FileOutcome) -> None:
        """Update counters from one file's outcome."""
        if outcome.status is OutcomeStatus.SKIPPED_EXTENSION:
            return
        self.files_found += 1
        if outcome.status is OutcomeStatus.TRANSCODED:
            self.files_transcoded += 1
        elif outcome.status is OutcomeStatus.PLANNED:
            self.files_planned += 1
        elif outcome.status is OutcomeStatus.SKIPPED_EXISTS:
            self.files_skipped += 1
        elif outcome.status is OutcomeStatus.FAILED:
            self.files_failed += 1
            self.failures.append(outcome)

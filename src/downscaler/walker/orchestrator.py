"""Tree walker that mirrors a source tree into a transcoded destination tree.

Files are processed one at a time. Every file yields a FileOutcome which
the walk loop inspects explicitly: a failed encode is either recorded and
skipped, or stops the walk, depending on the ErrorPolicy. Directory listing
failures always stop the walk with a TraversalError.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

from downscaler.config.models import DEFAULT_EXTENSIONS
from downscaler.exceptions import EncodeError, PathError, TraversalError
from downscaler.executor.interface import Encoder
from downscaler.logging.context import file_context
from downscaler.policy.overrides import ResolverConfig, resolve, split_relative_path
from downscaler.walker.models import (
    ErrorPolicy,
    FileOutcome,
    OutcomeStatus,
    WalkResult,
)

logger = logging.getLogger(__name__)


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    return frozenset(ext.strip().lstrip(".").casefold() for ext in extensions)


class TreeWalker:
    """Walks a source tree and transcodes eligible files into a mirror tree."""

    def __init__(
        self,
        resolver_config: ResolverConfig,
        encoder: Encoder,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        container: str = "mp4",
        error_policy: ErrorPolicy = ErrorPolicy.CONTINUE,
        overwrite: bool = False,
        dry_run: bool = False,
    ):
        """Initialize the walker.

        Args:
            resolver_config: Override rules and default height.
            encoder: Component that transcodes one file.
            extensions: Source file extensions to transcode.
            container: Extension given to destination files.
            error_policy: Whether to continue or abort after a failed file.
            overwrite: Re-encode files whose destination already exists.
            dry_run: Log what would be done without creating anything.
        """
        self.resolver_config = resolver_config
        self.encoder = encoder
        self.extensions = _normalize_extensions(extensions)
        self.container = container.lstrip(".")
        self.error_policy = error_policy
        self.overwrite = overwrite
        self.dry_run = dry_run
        self._skip_dir: Path | None = None
        # Destination -> source that produced it in the current walk
        self._claimed: dict[Path, Path] = {}

    def walk(self, source_root: Path, destination_root: Path) -> WalkResult:
        """Process every file below source_root.

        Args:
            source_root: Root of the input tree.
            destination_root: Root of the mirrored output tree.

        Returns:
            WalkResult with counters and failed outcomes. ``aborted`` is set
            when the ABORT policy stopped the walk after a failure.

        Raises:
            TraversalError: If a directory cannot be listed or an entry's
                relative path cannot be computed.
        """
        if not source_root.is_dir():
            raise TraversalError("Source is not a directory", source_root)

        # A destination nested in the source must not be walked into
        resolved_dest = destination_root.resolve()
        if resolved_dest.is_relative_to(source_root.resolve()):
            self._skip_dir = resolved_dest
        else:
            self._skip_dir = None
        self._claimed = {}

        result = WalkResult()
        start_time = time.monotonic()
        try:
            self._walk_directory(source_root, source_root, destination_root, result)
        finally:
            result.elapsed_seconds = time.monotonic() - start_time

        return result

    def _walk_directory(
        self,
        directory: Path,
        source_root: Path,
        destination_root: Path,
        result: WalkResult,
    ) -> bool:
        """Process one directory recursively.

        Returns:
            False if the walk was aborted, True otherwise.
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise TraversalError(
                f"Cannot list directory ({e.strerror or e})", directory
            ) from e

        for entry in entries:
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as e:
                raise TraversalError(
                    f"Cannot stat entry ({e.strerror or e})", path
                ) from e

            if is_dir:
                if self._skip_dir is not None and path.resolve() == self._skip_dir:
                    logger.warning("skipping destination directory %s", path)
                    continue
                keep_going = self._walk_directory(
                    path, source_root, destination_root, result
                )
                if not keep_going:
                    return False
            elif is_file:
                outcome = self.process_file(path, source_root, destination_root)
                result.record(outcome)
                if outcome.failed:
                    if self.error_policy is ErrorPolicy.ABORT:
                        logger.error(
                            "Aborting after failure on %s: %s",
                            outcome.display_path,
                            outcome.error,
                        )
                        result.aborted = True
                        return False
                    logger.error(
                        "Failed %s, continuing: %s",
                        outcome.display_path,
                        outcome.error,
                    )
            else:
                logger.debug("ignoring entry - not a regular file %s", path)

        return True

    def destination_for(
        self, relative_path: tuple[str, ...], destination_root: Path
    ) -> Path:
        """Map a relative source path to its destination file."""
        return destination_root.joinpath(*relative_path).with_suffix(
            f".{self.container}"
        )

    def process_file(
        self, path: Path, source_root: Path, destination_root: Path
    ) -> FileOutcome:
        """Decide what to do with one file and do it.

        Encode failures are returned as a FAILED outcome, never raised.

        Raises:
            PathError: If the file's path relative to source_root cannot
                be computed.
        """
        try:
            relative = split_relative_path(path.relative_to(source_root))
        except ValueError as e:
            raise PathError("Path is outside the source root", path) from e
        if not relative:
            raise PathError("Path has no components relative to source root", path)

        extension = path.suffix.lstrip(".").casefold()
        if not extension or extension not in self.extensions:
            logger.debug("ignoring file - wrong extension %s", path)
            return FileOutcome(relative, OutcomeStatus.SKIPPED_EXTENSION, path)

        destination = self.destination_for(relative, destination_root)

        with file_context("/".join(relative)):
            claimed_by = self._claimed.setdefault(destination, path)
            if claimed_by != path:
                error = EncodeError(
                    f"Destination {destination} is already produced from "
                    f"{claimed_by}",
                    path,
                )
                return FileOutcome(
                    relative, OutcomeStatus.FAILED, path, destination, error=error
                )

            if destination.exists() and not self.overwrite:
                logger.debug("not overwriting %s", destination)
                return FileOutcome(
                    relative, OutcomeStatus.SKIPPED_EXISTS, path, destination
                )

            height = resolve(self.resolver_config, relative)

            if self.dry_run:
                logger.info(
                    "would run: %s", self.encoder.describe(path, destination, height)
                )
                return FileOutcome(
                    relative, OutcomeStatus.PLANNED, path, destination, height
                )

            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                error = EncodeError(
                    f"Cannot create destination directory ({e.strerror or e})", path
                )
                return FileOutcome(
                    relative, OutcomeStatus.FAILED, path, destination, height, error
                )

            try:
                self.encoder.transcode(path, destination, height)
            except EncodeError as e:
                return FileOutcome(
                    relative, OutcomeStatus.FAILED, path, destination, height, e
                )

        return FileOutcome(
            relative, OutcomeStatus.TRANSCODED, path, destination, height
        )

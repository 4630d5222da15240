"""FFmpeg transcode executor.

Each file is encoded into a ``.working`` file next to its destination and
renamed into place only after FFmpeg succeeds, so an interrupted run never
leaves a truncated file under the final name. When a temp directory is
configured (for example a local disk while source and destination live on
network storage), the source is first copied there and FFmpeg reads and
writes local files only.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from downscaler.config.models import EncoderConfig
from downscaler.core.subprocess_utils import format_command, run_command
from downscaler.exceptions import EncodeError
from downscaler.executor.command import build_ffmpeg_command

logger = logging.getLogger(__name__)

# Lines of FFmpeg stderr kept on EncodeError
STDERR_TAIL_LINES = 20

WORKING_MARKER = ".working"


def working_path_for(destination: Path) -> Path:
    """Return the in-progress path for a destination.

    The container suffix is kept last so FFmpeg can infer the muxer:
    ``movie.mp4`` becomes ``movie.working.mp4``.
    """
    return destination.with_name(
        f"{destination.stem}{WORKING_MARKER}{destination.suffix}"
    )


def _stderr_tail(stderr: str) -> str:
    lines = stderr.strip().splitlines()
    return "\n".join(lines[-STDERR_TAIL_LINES:])


def _remove_if_exists(path: Path, label: str) -> None:
    if path.exists():
        logger.debug("removing pre-existing %s %s", label, path)
        path.unlink()


class TranscodeExecutor:
    """Transcodes single files with FFmpeg."""

    def __init__(
        self,
        encoder: EncoderConfig,
        ffmpeg_path: Path | str = "ffmpeg",
        temp_directory: Path | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            encoder: Codec, quality and container settings.
            ffmpeg_path: FFmpeg executable.
            temp_directory: Optional staging directory for input and output.
        """
        self.encoder = encoder
        self.ffmpeg_path = ffmpeg_path
        self.temp_directory = temp_directory

    def describe(self, source: Path, destination: Path, height: int | None) -> str:
        cmd = build_ffmpeg_command(
            self.ffmpeg_path, source, destination, self.encoder, height
        )
        return format_command(cmd)

    def transcode(self, source: Path, destination: Path, height: int | None) -> None:
        """Transcode source into destination.

        Raises:
            EncodeError: If staging, FFmpeg, or the final rename fails.
        """
        if height is not None:
            logger.info("scaling to max %dp %s to %s", height, source, destination)
        else:
            logger.info("re-encoding without scaling %s to %s", source, destination)

        working = working_path_for(destination)
        temp_input: Path | None = None
        temp_output: Path | None = None
        if self.temp_directory is not None:
            temp_input = self.temp_directory / f"downscaler_input_{source.name}"
            temp_output = self.temp_directory / f"downscaler_output_{destination.name}"

        try:
            _remove_if_exists(working, "working output")
            if temp_input is not None and temp_output is not None:
                _remove_if_exists(temp_input, "temp input")
                _remove_if_exists(temp_output, "temp output")
                logger.info("copying source to temp location %s", temp_input)
                shutil.copy(source, temp_input)
                self._run_ffmpeg(source, temp_input, temp_output, height)
                logger.info("copying result to working file %s", working)
                shutil.copy(temp_output, working)
            else:
                self._run_ffmpeg(source, source, working, height)

            logger.info("renaming to final destination %s", destination)
            os.replace(working, destination)
        except OSError as e:
            self._discard(working)
            raise EncodeError(f"I/O error while transcoding ({e})", source) from e
        except EncodeError:
            self._discard(working)
            raise
        finally:
            for temp in (temp_input, temp_output):
                if temp is not None:
                    self._discard(temp)

        logger.info("Succeeded")

    def _run_ffmpeg(
        self, source: Path, input_path: Path, output_path: Path, height: int | None
    ) -> None:
        cmd = build_ffmpeg_command(
            self.ffmpeg_path, input_path, output_path, self.encoder, height
        )
        logger.info("running %s", format_command(cmd))

        _, stderr, returncode = run_command(cmd)

        if returncode < 0:
            raise EncodeError(
                f"ffmpeg terminated by signal {-returncode}",
                source,
                returncode=returncode,
                stderr=_stderr_tail(stderr),
            )
        if returncode != 0:
            tail = _stderr_tail(stderr)
            if tail:
                logger.error("ffmpeg output:\n%s", tail)
            raise EncodeError(
                f"ffmpeg exited with status code {returncode}",
                source,
                returncode=returncode,
                stderr=tail,
            )
        logger.debug("ffmpeg succeeded")

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)

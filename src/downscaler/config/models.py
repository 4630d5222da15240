"""Configuration dataclasses.

These are the resolved, runtime view of the configuration after CLI
options, environment variables and the config file have been merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = ("debug", "info", "warning", "error")
VALID_LOG_FORMATS = ("text", "json")
VALID_PRESETS = (
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
)

DEFAULT_EXTENSIONS = ("mp4", "mkv")
DEFAULT_EXTRA_ARGS: tuple[str, ...] = ()


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {VALID_LOG_LEVELS}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {VALID_LOG_FORMATS}, got {self.format}"
            )


@dataclass(frozen=True)
class EncoderConfig:
    """Settings passed to the external encoder."""

    codec: str = "libx265"
    crf: int = 28
    preset: str = "fast"
    audio_codec: str = "copy"
    container: str = "mp4"
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    extra_args: tuple[str, ...] = DEFAULT_EXTRA_ARGS
    scale_algorithm: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 0 <= self.crf <= 51:
            raise ValueError(f"crf must be between 0 and 51, got {self.crf}")
        if self.preset not in VALID_PRESETS:
            raise ValueError(
                f"preset must be one of {', '.join(VALID_PRESETS)}, got {self.preset}"
            )
        if not self.container or "." in self.container:
            raise ValueError(
                f"container must be a bare extension like 'mp4', got {self.container!r}"
            )


@dataclass(frozen=True)
class ToolPathsConfig:
    """Explicit paths to external tools (None = look up on PATH)."""

    ffmpeg: Path | None = None


@dataclass
class DownscalerConfig:
    """Merged configuration for a run."""

    default_height: int | None = None
    # Raw DIR -> HEIGHT overrides from the config file, in file order
    overrides: dict[str, int] = field(default_factory=dict)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    temp_directory: Path | None = None

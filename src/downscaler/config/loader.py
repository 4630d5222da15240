"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (DOWNSCALER_*)
3. Config file (~/.downscaler/config.toml)
4. Default values

Environment variables:
- DOWNSCALER_CONFIG_PATH: Path to config file (overrides default location)
- DOWNSCALER_LOG_LEVEL: Log level (debug, info, warning, error)
- DOWNSCALER_LOG_FORMAT: Log format (text, json)
- DOWNSCALER_FFMPEG_PATH: Path to ffmpeg executable
- DOWNSCALER_TEMP_DIR: Directory used to stage source and output files
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from downscaler.config.env import EnvReader
from downscaler.config.file_models import ConfigFileModel
from downscaler.config.models import (
    DownscalerConfig,
    EncoderConfig,
    LoggingConfig,
    ToolPathsConfig,
)
from downscaler.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".downscaler"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by DOWNSCALER_CONFIG_PATH environment variable.
    """
    reader = env_reader or EnvReader()
    env_path = reader.get_str("DOWNSCALER_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path) -> ConfigFileModel:
    """Load and validate the TOML config file.

    Args:
        path: Path to config file.

    Returns:
        Validated file model. Defaults if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return ConfigFileModel()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e

    try:
        return ConfigFileModel.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def _pick(*values):
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_config(
    config_path: Path | None = None,
    *,
    # CLI overrides (highest precedence)
    default_height: int | None = None,
    crf: int | None = None,
    preset: str | None = None,
    container: str | None = None,
    extensions: tuple[str, ...] | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
) -> DownscalerConfig:
    """Build the run configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides DOWNSCALER_CONFIG_PATH).
        default_height: CLI --scale value.
        crf: CLI --crf value.
        preset: CLI --preset value.
        container: CLI --container value.
        extensions: CLI --extensions value.
        log_level: CLI --log-level value.
        log_file: CLI --log-file value.
        log_format: CLI log format ("json" when --log-json is given).
        env_reader: Optional EnvReader for testing (uses os.environ if None).

    Returns:
        DownscalerConfig with merged configuration.

    Raises:
        ConfigError: If the config file or a merged value is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path)

    file_encoder = file_config.encoder
    file_logging = file_config.logging

    try:
        encoder = EncoderConfig(
            codec=_pick(file_encoder.codec, EncoderConfig.codec),
            crf=_pick(crf, file_encoder.crf, EncoderConfig.crf),
            preset=_pick(preset, file_encoder.preset, EncoderConfig.preset),
            audio_codec=_pick(file_encoder.audio_codec, EncoderConfig.audio_codec),
            container=_pick(container, file_encoder.container, EncoderConfig.container),
            extensions=_pick(
                extensions,
                tuple(file_encoder.extensions) if file_encoder.extensions else None,
                EncoderConfig.extensions,
            ),
            extra_args=_pick(
                tuple(file_encoder.extra_args)
                if file_encoder.extra_args is not None
                else None,
                EncoderConfig.extra_args,
            ),
            scale_algorithm=file_encoder.scale_algorithm,
        )

        file_log_path = (
            Path(file_logging.file).expanduser() if file_logging.file else None
        )
        defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=_pick(
                log_level,
                reader.get_str("DOWNSCALER_LOG_LEVEL"),
                file_logging.level,
                defaults.level,
            ),
            file=_pick(log_file, file_log_path),
            format=_pick(
                log_format,
                reader.get_str("DOWNSCALER_LOG_FORMAT"),
                file_logging.format,
                defaults.format,
            ),
            include_stderr=_pick(file_logging.include_stderr, defaults.include_stderr),
            max_bytes=_pick(file_logging.max_bytes, defaults.max_bytes),
            backup_count=_pick(file_logging.backup_count, defaults.backup_count),
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e

    file_ffmpeg = (
        Path(file_config.tools.ffmpeg).expanduser()
        if file_config.tools.ffmpeg
        else None
    )
    tools = ToolPathsConfig(
        ffmpeg=_pick(reader.get_path("DOWNSCALER_FFMPEG_PATH"), file_ffmpeg),
    )

    file_temp = (
        Path(file_config.temp_directory).expanduser()
        if file_config.temp_directory
        else None
    )
    temp_directory = _pick(reader.get_path("DOWNSCALER_TEMP_DIR"), file_temp)
    if temp_directory is not None and not temp_directory.is_dir():
        logger.warning(
            "Temp directory '%s' is not a valid directory, encoding in place",
            temp_directory,
        )
        temp_directory = None

    return DownscalerConfig(
        default_height=_pick(default_height, file_config.scale),
        overrides=dict(file_config.overrides),
        encoder=encoder,
        tools=tools,
        logging=logging_config,
        temp_directory=temp_directory,
    )


def describe_config(config: DownscalerConfig) -> dict:
    """Return a loggable summary of the effective configuration."""
    summary = dataclasses.asdict(config.encoder)
    summary["default_height"] = config.default_height
    summary["ffmpeg"] = str(config.tools.ffmpeg) if config.tools.ffmpeg else "PATH"
    summary["temp_directory"] = (
        str(config.temp_directory) if config.temp_directory else None
    )
    return summary

"""CLI module for downscaler."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from downscaler.cli.exit_codes import ExitCode
from downscaler.cli.output import error_exit, format_summary
from downscaler.config import describe_config, get_config
from downscaler.config.models import VALID_LOG_LEVELS, VALID_PRESETS
from downscaler.exceptions import ConfigError, ToolNotFoundError, TraversalError
from downscaler.executor import TranscodeExecutor, require_tool
from downscaler.logging import configure_logging
from downscaler.policy import (
    build_resolver_config,
    parse_height,
    parse_override,
    rules_from_mapping,
)
from downscaler.walker import ErrorPolicy, TreeWalker

logger = logging.getLogger(__name__)


def _parse_extensions(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    extensions = tuple(
        ext.strip().lstrip(".").casefold() for ext in value.split(",") if ext.strip()
    )
    if not extensions:
        raise ConfigError(f"No extensions given in '{value}'", value)
    return extensions


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="downscaler")
@click.option(
    "-s",
    "--source",
    required=True,
    type=click.Path(path_type=Path),
    help="Root of the input tree.",
)
@click.option(
    "-d",
    "--destination",
    required=True,
    type=click.Path(path_type=Path, file_okay=False),
    help="Root of the mirrored output tree (created if missing).",
)
@click.option(
    "--scale",
    metavar="HEIGHT",
    default=None,
    help="Default maximum height (omit for no scaling, just re-encode).",
)
@click.option(
    "--override",
    "overrides",
    metavar="DIR:HEIGHT",
    multiple=True,
    help="Maximum height for a directory relative to --source "
    "(e.g. --override movies/kids:480). Repeatable; the longest match wins.",
)
@click.option(
    "--extensions",
    default=None,
    help="Comma-separated source extensions to transcode (default: mp4,mkv).",
)
@click.option(
    "--container",
    default=None,
    help="Extension for destination files (default: mp4).",
)
@click.option(
    "--crf",
    type=click.IntRange(0, 51),
    default=None,
    help="Encoder CRF (default: 28).",
)
@click.option(
    "--preset",
    type=click.Choice(VALID_PRESETS),
    default=None,
    help="Encoder preset (default: fast).",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    default=False,
    help="Stop at the first file that fails to transcode.",
)
@click.option(
    "--overwrite",
    is_flag=True,
    default=False,
    help="Re-encode files whose destination already exists.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Log the ffmpeg commands without running them.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.downscaler/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override log level (default: info, or DOWNSCALER_LOG_LEVEL).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Write logs to this file.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
def main(
    source: Path,
    destination: Path,
    scale: str | None,
    overrides: tuple[str, ...],
    extensions: str | None,
    container: str | None,
    crf: int | None,
    preset: str | None,
    fail_fast: bool,
    overwrite: bool,
    dry_run: bool,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Transcode a directory tree of videos to HEVC, mirroring its layout.

    Every mp4/mkv file under SOURCE is re-encoded into the same relative
    location under DESTINATION, optionally capped to a maximum height.
    Heights are never increased.
    """
    # Parse everything before any processing begins
    try:
        default_height = (
            parse_height(scale, source="scale") if scale is not None else None
        )
        cli_rules = [parse_override(value) for value in overrides]
        config = get_config(
            config_path,
            default_height=default_height,
            crf=crf,
            preset=preset,
            container=container.lstrip(".") if container else None,
            extensions=_parse_extensions(extensions),
            log_level=log_level,
            log_file=log_file,
            log_format="json" if log_json else None,
        )
        # Config file rules first so the command line wins on duplicates
        resolver_config = build_resolver_config(
            config.default_height,
            [*rules_from_mapping(config.overrides), *cli_rules],
        )
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    configure_logging(config.logging)

    if not source.is_dir():
        error_exit(f"Source path {source} does not exist", ExitCode.TARGET_NOT_FOUND)

    logger.info("Default scale: %s", config.default_height)
    if resolver_config.rules:
        logger.info(
            "Scale overrides: %s",
            ", ".join(
                f"{rule.display_path}={rule.height}" for rule in resolver_config.rules
            ),
        )
    logger.debug("Effective configuration: %s", describe_config(config))

    if dry_run:
        ffmpeg_path: Path | str = config.tools.ffmpeg or "ffmpeg"
    else:
        try:
            ffmpeg_path = require_tool("ffmpeg", config.tools.ffmpeg)
        except ToolNotFoundError as e:
            error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE)

    executor = TranscodeExecutor(
        config.encoder,
        ffmpeg_path=ffmpeg_path,
        temp_directory=config.temp_directory,
    )
    walker = TreeWalker(
        resolver_config,
        executor,
        extensions=config.encoder.extensions,
        container=config.encoder.container,
        error_policy=ErrorPolicy.ABORT if fail_fast else ErrorPolicy.CONTINUE,
        overwrite=overwrite,
        dry_run=dry_run,
    )

    try:
        result = walker.walk(source, destination)
    except TraversalError as e:
        logger.error("Traversal failed: %s", e)
        error_exit(str(e), ExitCode.OPERATION_FAILED)
    except KeyboardInterrupt:
        error_exit("Interrupted", ExitCode.INTERRUPTED)

    summary = format_summary(result, dry_run=dry_run)
    logger.info("Done: %s", summary)
    click.echo(summary)

    for outcome in result.failures:
        click.echo(f"  failed: {outcome.display_path}: {outcome.error}", err=True)

    if result.aborted:
        raise SystemExit(int(ExitCode.OPERATION_FAILED))
    if result.files_failed:
        raise SystemExit(int(ExitCode.PARTIAL_FAILURE))

"""FFmpeg command building for transcoding.

This module constructs the FFmpeg command line for one file: HEVC video at a
fixed CRF, copied audio, and an optional height cap.
"""

from __future__ import annotations

from pathlib import Path

from downscaler.config.models import EncoderConfig
from downscaler.policy.scaling import build_scale_filter


# Encoders that take a -crf quality value
CRF_CODECS = frozenset({"libx264", "libx265", "libvpx-vp9", "libaom-av1", "libsvtav1"})


def build_quality_args(encoder: EncoderConfig) -> list[str]:
    """Build FFmpeg codec and quality arguments."""
    args = ["-c:v", encoder.codec]
    if encoder.codec in CRF_CODECS:
        args.extend(["-crf", str(encoder.crf)])

    # Preset (for x264/x265 encoders)
    if encoder.codec in ("libx264", "libx265"):
        args.extend(["-preset", encoder.preset])

    args.extend(["-c:a", encoder.audio_codec])
    return args


def build_ffmpeg_command(
    ffmpeg_path: Path | str,
    input_path: Path,
    output_path: Path,
    encoder: EncoderConfig,
    height: int | None,
) -> list[str]:
    """Build FFmpeg command for transcoding one file.

    Args:
        ffmpeg_path: FFmpeg executable.
        input_path: File to read.
        output_path: File to write (overwritten if present).
        encoder: Codec, quality and extra argument settings.
        height: Maximum output height, or None to keep the resolution.

    Returns:
        List of command arguments.
    """
    cmd = [str(ffmpeg_path), "-hide_banner", "-y"]

    cmd.extend(["-i", str(input_path)])

    cmd.extend(build_quality_args(encoder))

    scale_filter = build_scale_filter(height, encoder.scale_algorithm)
    if scale_filter is not None:
        cmd.extend(["-vf", scale_filter])

    cmd.extend(["-loglevel", "warning", "-nostats"])
    if encoder.codec == "libx265":
        cmd.extend(["-x265-params", "log-level=error"])

    # Custom arguments (inserted before output)
    cmd.extend(encoder.extra_args)

    cmd.append(str(output_path))

    return cmd

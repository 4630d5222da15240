"""Encoder invocation: FFmpeg command building and staged transcoding."""

from downscaler.executor.command import build_ffmpeg_command, build_quality_args
from downscaler.executor.interface import Encoder, require_tool
from downscaler.executor.transcode import TranscodeExecutor, working_path_for

__all__ = [
    "Encoder",
    "TranscodeExecutor",
    "build_ffmpeg_command",
    "build_quality_args",
    "require_tool",
    "working_path_for",
]

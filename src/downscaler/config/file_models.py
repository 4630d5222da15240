"""Pydantic models for the TOML config file.

The file is user-authored, so unknown keys are rejected instead of being
silently ignored.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from downscaler.config.models import VALID_PRESETS


class EncoderSection(BaseModel):
    """[encoder] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    codec: str | None = None
    crf: int | None = Field(default=None, ge=0, le=51)
    preset: str | None = None
    audio_codec: str | None = None
    container: str | None = None
    extensions: list[str] | None = None
    extra_args: list[str] | None = None
    scale_algorithm: str | None = None

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, v: str | None) -> str | None:
        """Validate encoding preset."""
        if v is not None and v not in VALID_PRESETS:
            raise ValueError(
                f"Invalid preset '{v}'. Must be one of: {', '.join(VALID_PRESETS)}"
            )
        return v

    @field_validator("container")
    @classmethod
    def validate_container(cls, v: str | None) -> str | None:
        """Strip a leading dot from the container extension."""
        if v is None:
            return v
        v = v.lstrip(".")
        if not v:
            raise ValueError("container must not be empty")
        return v

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str] | None) -> list[str] | None:
        """Normalize extensions to lowercase without dots."""
        if v is None:
            return v
        normalized = [ext.strip().lstrip(".").casefold() for ext in v]
        if not all(normalized):
            raise ValueError("extensions must not contain empty values")
        return normalized


class ToolsSection(BaseModel):
    """[tools] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ffmpeg: str | None = None


class LoggingSection(BaseModel):
    """[logging] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["debug", "info", "warning", "error"] | None = None
    file: str | None = None
    format: Literal["text", "json"] | None = None
    include_stderr: bool | None = None
    max_bytes: int | None = Field(default=None, gt=0)
    backup_count: int | None = Field(default=None, ge=0)


class ConfigFileModel(BaseModel):
    """Top-level config file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scale: int | None = Field(default=None, gt=0)
    temp_directory: str | None = None
    overrides: dict[str, int] = Field(default_factory=dict)
    encoder: EncoderSection = Field(default_factory=EncoderSection)
    tools: ToolsSection = Field(default_factory=ToolsSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    @field_validator("overrides")
    @classmethod
    def validate_overrides(cls, v: dict[str, int]) -> dict[str, int]:
        """Reject non-positive override heights."""
        for directory, height in v.items():
            if height <= 0:
                raise ValueError(
                    f"Override height for '{directory}' must be > 0, got {height}"
                )
        return v

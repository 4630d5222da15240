"""Directory-scoped height overrides.

An override rule caps the output height of every file below a directory
relative to the source root. When several rules match a file, the one with
the most path components wins; when none match, the global default applies.

Matching compares whole path components anchored at the source root, so a
rule for ``tv`` matches ``tv/kids/a.mkv`` but neither ``tvfish/a.mkv`` nor
``movies/tv/a.mkv``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import PurePath

from downscaler.exceptions import ConfigError

logger = logging.getLogger(__name__)


def parse_height(value: str | int, *, source: str = "height") -> int:
    """Parse a positive pixel height.

    Args:
        value: Raw value from the CLI or config file.
        source: Label used in error messages.

    Returns:
        The height as an int.

    Raises:
        ConfigError: If the value is not a positive integer.
    """
    if isinstance(value, bool):
        raise ConfigError(f"Invalid {source} {value!r}, expected number", str(value))
    if isinstance(value, int):
        height = value
    else:
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ConfigError(
                f"Invalid {source} '{value}', expected number", value
            )
        height = int(text)
    if height <= 0:
        raise ConfigError(f"Invalid {source} '{value}', must be > 0", str(value))
    return height


def split_dir_prefix(value: str) -> tuple[str, ...]:
    """Split a ``/``-separated directory into path components.

    Leading/trailing separators and ``.`` components are dropped.

    Raises:
        ConfigError: If nothing is left or a ``..`` component is present.
    """
    parts = tuple(
        p for p in value.replace("\\", "/").split("/") if p not in ("", ".")
    )
    if not parts:
        raise ConfigError(f"Override directory '{value}' is empty", value)
    if ".." in parts:
        raise ConfigError(
            f"Override directory '{value}' must not contain '..'", value
        )
    return parts


def split_relative_path(path: PurePath) -> tuple[str, ...]:
    """Return the components of a path relative to the source root."""
    return tuple(part for part in path.parts if part not in ("", "."))


@dataclass(frozen=True)
class OverrideRule:
    """One ``DIR:HEIGHT`` override."""

    path_prefix: tuple[str, ...]
    height: int

    def __post_init__(self) -> None:
        if not self.path_prefix:
            raise ConfigError("Override path prefix must not be empty")
        if self.height <= 0:
            raise ConfigError(
                f"Override height for '{self.display_path}' must be > 0, "
                f"got {self.height}"
            )

    @property
    def display_path(self) -> str:
        return "/".join(self.path_prefix)

    def matches(self, directories: Sequence[str]) -> bool:
        """Check whether this rule's prefix is a component prefix of directories."""
        depth = len(self.path_prefix)
        if depth > len(directories):
            return False
        return tuple(directories[:depth]) == self.path_prefix


@dataclass(frozen=True)
class ResolverConfig:
    """Immutable set of override rules plus the optional default height."""

    rules: tuple[OverrideRule, ...] = ()
    default_height: int | None = None

    def __post_init__(self) -> None:
        if self.default_height is not None and self.default_height <= 0:
            raise ConfigError(
                f"Default scale must be > 0, got {self.default_height}"
            )


def parse_override(value: str) -> OverrideRule:
    """Parse an override string like ``movies/kids:480``.

    The value is split on the first ``:``.

    Raises:
        ConfigError: If the value is malformed.
    """
    directory, sep, height_text = value.partition(":")
    if not sep:
        raise ConfigError(
            f"Override must be in format DIR:HEIGHT, got '{value}'", value
        )
    prefix = split_dir_prefix(directory)
    height = parse_height(height_text, source="height in override")
    return OverrideRule(path_prefix=prefix, height=height)


def rules_from_mapping(overrides: Mapping[str, int]) -> list[OverrideRule]:
    """Build rules from a ``{"movies/kids": 480}`` mapping (config file form).

    Raises:
        ConfigError: If a directory or height is invalid.
    """
    return [
        OverrideRule(
            path_prefix=split_dir_prefix(directory),
            height=parse_height(height, source=f"height for override '{directory}'"),
        )
        for directory, height in overrides.items()
    ]


def build_resolver_config(
    default_height: int | None,
    rules: Iterable[OverrideRule],
) -> ResolverConfig:
    """Build a ResolverConfig, collapsing duplicate prefixes.

    When the same directory appears more than once the last rule wins and
    a warning is logged.

    Args:
        default_height: Global maximum height, or None for no scaling.
        rules: Rules in declaration order (config file first, then CLI).

    Returns:
        ResolverConfig with unique prefixes.
    """
    by_prefix: dict[tuple[str, ...], OverrideRule] = {}
    for rule in rules:
        previous = by_prefix.pop(rule.path_prefix, None)
        if previous is not None and previous.height != rule.height:
            logger.warning(
                "Duplicate override for '%s': %dp replaces %dp",
                rule.display_path,
                rule.height,
                previous.height,
            )
        by_prefix[rule.path_prefix] = rule
    return ResolverConfig(
        rules=tuple(by_prefix.values()), default_height=default_height
    )


def resolve(config: ResolverConfig, file_path: Sequence[str]) -> int | None:
    """Determine the maximum output height for a file.

    Args:
        config: Override rules and default height.
        file_path: Path components relative to the source root, ending
            with the file name. Only the directory components are matched.

    Returns:
        Height in pixels, or None when the file should not be scaled.
    """
    directories = tuple(file_path[:-1])

    best: OverrideRule | None = None
    for rule in config.rules:
        if not rule.matches(directories):
            continue
        if best is None or len(rule.path_prefix) > len(best.path_prefix):
            best = rule

    if best is not None:
        return best.height
    return config.default_height

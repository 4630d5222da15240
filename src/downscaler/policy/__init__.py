"""Override resolution and scale filter construction."""

from downscaler.policy.overrides import (
    OverrideRule,
    ResolverConfig,
    build_resolver_config,
    parse_height,
    parse_override,
    resolve,
    rules_from_mapping,
    split_dir_prefix,
    split_relative_path,
)
from downscaler.policy.scaling import build_scale_filter, compute_output_dimensions

__all__ = [
    "OverrideRule",
    "ResolverConfig",
    "build_resolver_config",
    "build_scale_filter",
    "compute_output_dimensions",
    "parse_height",
    "parse_override",
    "resolve",
    "rules_from_mapping",
    "split_dir_prefix",
    "split_relative_path",
]

"""Configuration management for downscaler.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (DOWNSCALER_*)
3. Config file (~/.downscaler/config.toml)
4. Default values (lowest priority)
"""

from downscaler.config.env import EnvReader
from downscaler.config.loader import (
    describe_config,
    get_config,
    get_default_config_path,
    load_config_file,
)
from downscaler.config.models import (
    DownscalerConfig,
    EncoderConfig,
    LoggingConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "DownscalerConfig",
    "EncoderConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "describe_config",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]

"""Configuration loading, schema, and defaults."""

from autoapprove.config.loader import ConfigError, load_config
from autoapprove.config.schema import AutoApproveConfig

__all__ = [
    "AutoApproveConfig",
    "ConfigError",
    "load_config",
]

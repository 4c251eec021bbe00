"""Configuration loading and validation."""

from stackdoc.config.loader import ConfigError, get_default_config, load_config
from stackdoc.config.models import StackdocConfig

__all__ = [
    "ConfigError",
    "StackdocConfig",
    "get_default_config",
    "load_config",
]

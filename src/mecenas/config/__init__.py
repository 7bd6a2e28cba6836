"""Configuration loading and schema."""

from mecenas.config.loader import ConfigError, load_config
from mecenas.config.schema import MecenasConfig

__all__ = ["ConfigError", "MecenasConfig", "load_config"]

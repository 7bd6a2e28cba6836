"""Configuration loading and validation."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from mecenas.config.schema import MecenasConfig

logger = logging.getLogger(__name__)

STATE_DIR = Path.home() / ".mecenas"
DEFAULT_CONFIG_PATH = STATE_DIR / "mecenas.yaml"

VALID_PRIVACY_MODES = ("auto", "strict", "off")


class ConfigError(Exception):
    """Configuration loading or validation error."""


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> MecenasConfig:
    """Load and validate Mecenas configuration from YAML file.

    Environment overrides (MECENAS_MODEL, MECENAS_SPEED_MODEL,
    MECENAS_PRIVACY_MODE, OLLAMA_URL) are applied after the file is read.

    Args:
        path: Path to config file. If None, tries default location.
              If file doesn't exist, returns default config.
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not path.exists():
        config = MecenasConfig()
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            config = MecenasConfig(**config_data) if config_data else MecenasConfig()

        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    return apply_env_overrides(config, os.environ if env is None else env)


def apply_env_overrides(config: MecenasConfig, env: Mapping[str, str]) -> MecenasConfig:
    """Apply environment variable overrides to a loaded config.

    Args:
        config: Loaded configuration
        env: Environment mapping

    Returns:
        The same config object, updated in place
    """
    if env.get("MECENAS_MODEL"):
        config.agent.model = env["MECENAS_MODEL"]
    if env.get("MECENAS_SPEED_MODEL"):
        config.agent.speed_model = env["MECENAS_SPEED_MODEL"]
    if env.get("OLLAMA_URL"):
        config.ollama.host = env["OLLAMA_URL"].rstrip("/")

    mode = env.get("MECENAS_PRIVACY_MODE")
    if mode:
        if mode in VALID_PRIVACY_MODES:
            config.privacy.mode = mode  # type: ignore[assignment]
        else:
            logger.warning("Ignoring invalid MECENAS_PRIVACY_MODE=%r", mode)

    return config


def get_anthropic_key(config: MecenasConfig, env: Optional[Mapping[str, str]] = None) -> str | None:
    """Read the Anthropic API key from the configured environment variable."""
    source = os.environ if env is None else env
    return source.get(config.cloud.api_key_env) or None


def save_config(config: MecenasConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save
        path: Destination path (string or Path object). If None, uses default location.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    elif isinstance(path, str):
        path = Path(path)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

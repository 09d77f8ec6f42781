"""Configuration loading for the profile registry.

This module handles loading registry configuration from YAML files
and environment variables.

Contract:
- Inputs: Config file paths, environment variables
- Outputs: RegistrySettings objects
- Side Effects: Creates default config file if missing
"""

import logging
import os
from pathlib import Path

import yaml

from ..storage.paths import get_config_dir
from .settings import RegistrySettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = """# connection profile registry configuration

# Type whose default profile is always loaded on refresh
base_type: "base"

# Type used when a new connection is created without an explicit type
default_type: "zosmf"

log_level: "info"

# Optional credential fields dropped from new profiles when left empty
credential_fields:
  - user
  - password

# Root directory for profiles and tree settings
# Can be overridden with CONNPROF_HOME environment variable
# home: "~/.connprof"
"""


def get_config_path() -> Path:
    """Get path to config file.

    Returns:
        Path to config.yaml in config directory
    """
    return get_config_dir() / "config.yaml"


def create_default_config() -> None:
    """Create default config file if it doesn't exist."""
    config_path = get_config_path()

    if config_path.exists():
        logger.debug(f"Config file already exists: {config_path}")
        return

    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    logger.info(f"Created default config: {config_path}")


def load_config(config_path: Path | None = None) -> RegistrySettings:
    """Load registry configuration from YAML and environment.

    Precedence is defaults < YAML < environment variables. Variables are
    prefixed with CONNPROF_ (e.g., CONNPROF_DEFAULT_TYPE).

    Args:
        config_path: Optional config file path (default: config.yaml in config dir)

    Returns:
        Validated registry settings
    """
    if config_path is None:
        config_path = get_config_path()
        if not config_path.exists():
            create_default_config()

    yaml_settings = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_settings = yaml.safe_load(f) or {}
            logger.debug(f"Loaded config from {config_path}")
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default settings and environment variables")

    # Only pass YAML values that don't have corresponding env vars
    filtered_yaml = {}
    for key, value in yaml_settings.items():
        env_key = f"CONNPROF_{key.upper()}"
        if env_key not in os.environ:
            filtered_yaml[key] = value

    settings = RegistrySettings(**filtered_yaml)

    logger.info(
        f"Registry configuration loaded: home={settings.home}, default_type={settings.default_type}, "
        f"base_type={settings.base_type}"
    )

    return settings

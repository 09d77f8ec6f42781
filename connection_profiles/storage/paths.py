"""Path resolution for profile registry storage locations.

This module provides path resolution based on the CONNPROF_HOME environment
variable, with an override for the config directory.

Contract:
- Inputs: Environment variables (CONNPROF_HOME, CONNPROF_CONFIG_DIR)
- Outputs: Resolved Path objects
- Side Effects: Creates directories if they don't exist
"""

import os
from pathlib import Path


def get_home_dir() -> Path:
    """Get CONNPROF_HOME from environment.

    Returns:
        Path to root directory (default: ~/.connprof)
    """
    root = os.environ.get("CONNPROF_HOME", "~/.connprof")
    return Path(root).expanduser().resolve()


def get_config_dir() -> Path:
    """Get configuration directory.

    Returns:
        Path to config directory ($CONNPROF_HOME/config)

    Environment Variables:
        CONNPROF_CONFIG_DIR: Override config directory location
    """
    config_dir: Path = get_home_dir() / "config"

    env_override: str | None = os.environ.get("CONNPROF_CONFIG_DIR")
    if env_override is not None:
        config_dir = Path(env_override).resolve()

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir

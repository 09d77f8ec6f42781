"""Persisted tree settings.

One YAML file maps each tree namespace to its sessions and favorites.
Each namespace is read and written as a whole object, including any keys
besides sessions and favorites.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from connection_profiles.models.trees import TreeSettings

logger = logging.getLogger(__name__)


class TreeSettingsError(RuntimeError):
    """Raised when the tree settings file cannot be read or written."""


class TreeSettingsStore:
    """YAML-backed settings for all tree namespaces."""

    def __init__(self, settings_path: Path) -> None:
        self.settings_path = Path(settings_path)

    def get(self, namespace: str) -> TreeSettings:
        """Return a copy of a namespace's settings (empty lists if unset).

        Raises:
            TreeSettingsError: If the settings file is unreadable
        """
        data = self._load().get(namespace) or {}
        return TreeSettings.model_validate(data)

    def update(self, namespace: str, value: TreeSettings) -> None:
        """Replace a namespace's settings.

        Raises:
            TreeSettingsError: If the settings file cannot be read or written

        Side Effects:
            Rewrites the settings file atomically
        """
        data = self._load()
        data[namespace] = value.model_dump()

        tmp_path = self.settings_path.with_suffix(".tmp")
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(yaml.safe_dump(data, default_flow_style=False), encoding="utf-8")
            tmp_path.rename(self.settings_path)
        except OSError as e:
            raise TreeSettingsError(f"Failed to write {self.settings_path}: {e}") from e
        logger.debug(f"Updated tree settings {namespace}")

    def _load(self) -> dict[str, Any]:
        if not self.settings_path.exists():
            return {}
        try:
            data = yaml.safe_load(self.settings_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise TreeSettingsError(f"Failed to read {self.settings_path}: {e}") from e
        return data if isinstance(data, dict) else {}

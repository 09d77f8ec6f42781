"""
Unit tests for configuration loading and storage paths.

Tests config file creation, loading from YAML, environment variable overrides
and directory resolution.
"""

from pathlib import Path

import pytest

from connection_profiles.config import loader
from connection_profiles.config.settings import RegistrySettings
from connection_profiles.storage import paths


@pytest.mark.unit
class TestPaths:
    """Test path resolution functions."""

    def test_get_home_dir_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_home_dir falls back to ~/.connprof."""
        monkeypatch.delenv("CONNPROF_HOME", raising=False)

        assert paths.get_home_dir() == Path("~/.connprof").expanduser().resolve()

    def test_get_home_dir_custom(self, mock_storage_env: Path) -> None:
        """Test get_home_dir respects CONNPROF_HOME."""
        assert paths.get_home_dir() == mock_storage_env.resolve()

    def test_get_config_dir_creates_directory(self, mock_storage_env: Path) -> None:
        """Test get_config_dir creates directory if it doesn't exist."""
        config_dir = paths.get_config_dir()

        assert config_dir.is_dir()
        assert config_dir == mock_storage_env.resolve() / "config"

    def test_get_config_dir_override(
        self, mock_storage_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test CONNPROF_CONFIG_DIR overrides the config location."""
        override = tmp_path / "elsewhere"
        monkeypatch.setenv("CONNPROF_CONFIG_DIR", str(override))

        assert paths.get_config_dir() == override.resolve()
        assert override.is_dir()


@pytest.mark.unit
class TestRegistrySettings:
    """Test the settings model."""

    def test_defaults(self, mock_storage_env: Path) -> None:
        """Test default values and derived paths."""
        settings = RegistrySettings()

        assert settings.base_type == "base"
        assert settings.default_type == "zosmf"
        assert settings.credential_fields == ["user", "password"]
        assert settings.home == str(mock_storage_env.resolve())
        assert settings.profiles_path == mock_storage_env.resolve() / "profiles"
        assert settings.settings_path == mock_storage_env.resolve() / "config" / "settings.yaml"

    def test_home_is_expanded(self) -> None:
        """Test ~ in home is expanded to an absolute path."""
        settings = RegistrySettings(home="~/profiles-home")

        assert Path(settings.home).is_absolute()
        assert "~" not in settings.home

    def test_env_override(self, mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test CONNPROF_ variables override defaults."""
        monkeypatch.setenv("CONNPROF_DEFAULT_TYPE", "ssh")

        assert RegistrySettings().default_type == "ssh"


@pytest.mark.unit
class TestConfigLoader:
    """Test configuration loading functions."""

    def test_get_config_path_returns_config_yaml(self, mock_storage_env: Path) -> None:
        """Test get_config_path returns config.yaml in config dir."""
        config_path = loader.get_config_path()

        assert config_path.name == "config.yaml"
        assert config_path.parent.name == "config"

    def test_create_default_config_has_yaml_content(self, mock_storage_env: Path) -> None:
        """Test create_default_config writes the documented keys."""
        loader.create_default_config()

        content = loader.get_config_path().read_text()
        assert "base_type:" in content
        assert "default_type:" in content
        assert "credential_fields:" in content

    def test_create_default_config_is_idempotent(self, mock_storage_env: Path) -> None:
        """Test create_default_config doesn't overwrite existing config."""
        config_path = loader.get_config_path()
        custom_content = "# Custom config\ndefault_type: ssh\n"
        config_path.write_text(custom_content)

        loader.create_default_config()

        assert config_path.read_text() == custom_content

    def test_load_config_creates_default_if_missing(self, mock_storage_env: Path) -> None:
        """Test load_config creates the default config and returns settings."""
        settings = loader.load_config()

        assert isinstance(settings, RegistrySettings)
        assert loader.get_config_path().exists()
        assert settings.default_type == "zosmf"

    def test_load_config_reads_yaml(self, mock_storage_env: Path, tmp_path: Path) -> None:
        """Test values from an explicit config file are applied."""
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("default_type: ssh\ncredential_fields: [user]\n")

        settings = loader.load_config(config_path)

        assert settings.default_type == "ssh"
        assert settings.credential_fields == ["user"]

    def test_env_overrides_yaml(
        self, mock_storage_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test environment variables take precedence over YAML."""
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("default_type: ssh\nbase_type: common\n")
        monkeypatch.setenv("CONNPROF_DEFAULT_TYPE", "tso")

        settings = loader.load_config(config_path)

        assert settings.default_type == "tso"
        assert settings.base_type == "common"

    def test_invalid_yaml_falls_back_to_defaults(self, mock_storage_env: Path, tmp_path: Path) -> None:
        """Test an unreadable config file does not prevent loading."""
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("default_type: [unclosed\n")

        settings = loader.load_config(config_path)

        assert settings.default_type == "zosmf"

    def test_explicit_missing_path_is_not_created(self, mock_storage_env: Path, tmp_path: Path) -> None:
        """Test a missing explicit config path yields defaults without writing a file."""
        config_path = tmp_path / "missing.yaml"

        settings = loader.load_config(config_path)

        assert settings.base_type == "base"
        assert not config_path.exists()

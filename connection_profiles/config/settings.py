"""Settings model for the profile registry.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Configuration for the profile registry.

    Attributes:
        home: Root directory for profiles and settings (default: ~/.connprof)
        base_type: Always-present type whose default is loaded on every refresh
        default_type: Type used when creating a profile without an explicit type
        log_level: Logging level (default: info)
        credential_fields: Optional credential fields dropped when left empty

    Example:
        >>> settings = RegistrySettings()
        >>> assert settings.base_type == "base"
        >>> assert settings.default_type == "zosmf"
    """

    model_config = SettingsConfigDict(
        env_prefix="CONNPROF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    home: str = "~/.connprof"
    base_type: str = "base"
    default_type: str = "zosmf"
    log_level: str = "info"
    credential_fields: list[str] = ["user", "password"]

    @field_validator("home")
    @classmethod
    def expand_and_resolve_path(cls, v: str) -> str:
        """Expand ~ and resolve to absolute path.

        Args:
            v: Path string (may contain ~ or be relative)

        Returns:
            Absolute path as string
        """
        return str(Path(v).expanduser().resolve())

    @property
    def profiles_path(self) -> Path:
        return Path(self.home) / "profiles"

    @property
    def settings_path(self) -> Path:
        return Path(self.home) / "config" / "settings.yaml"

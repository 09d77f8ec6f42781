"""Per-type persistent profile storage.

Storage structure:
    profiles/
        {type}/
            .meta.yaml            # defaultProfile + type configuration (schema)
            {name}.yaml           # one mapping of fields per profile

Profile names may not start with "." or carry surrounding whitespace, so no
profile file can collide with the metadata file.

Contract:
- Inputs: Profile names, types and field mappings
- Outputs: Profile models
- Side Effects: Reads and atomically writes YAML files under the profile root
"""

import logging
from pathlib import Path
from typing import Any
from typing import Protocol

import yaml

from connection_profiles.models.profiles import Profile
from connection_profiles.models.profiles import ProfileTypeConfiguration
from connection_profiles.profiles.errors import ProfileNotFoundError
from connection_profiles.profiles.errors import ProfileStoreError
from connection_profiles.profiles.errors import ProfileValidationError

logger = logging.getLogger(__name__)

META_FILENAME = ".meta.yaml"


class ProfileStore(Protocol):
    """Persistence contract for the profiles of one type."""

    @property
    def configurations(self) -> list[ProfileTypeConfiguration]: ...

    async def load(self, name: str | None = None, load_default: bool = False) -> Profile: ...

    async def load_all(self, type_only: bool = True) -> list[Profile]: ...

    async def save(self, profile: dict[str, Any], name: str, type: str, overwrite: bool = False) -> Profile: ...

    async def update(self, name: str, merge: bool, profile: dict[str, Any]) -> Profile: ...

    async def delete(self, profile: Profile, name: str, type: str) -> Profile: ...


class YamlProfileStore:
    """YAML-backed profile store for a single profile type.

    The first profile saved for a type becomes that type's default.
    Writes go through a temporary file and a rename so a failed write never
    leaves a truncated profile behind.
    """

    def __init__(self, profile_root: Path, profile_type: str) -> None:
        """Initialize with the shared profile root.

        Args:
            profile_root: Root directory holding one subdirectory per type
            profile_type: Type managed by this store
        """
        self.profile_root = Path(profile_root)
        self.profile_type = profile_type
        self.type_dir = self.profile_root / profile_type
        self.type_dir.mkdir(parents=True, exist_ok=True)
        self.meta_path = self.type_dir / META_FILENAME

    # --- Metadata ---

    @property
    def configurations(self) -> list[ProfileTypeConfiguration]:
        """Type configurations declared by every metadata file under the root."""
        configurations = []
        for meta_path in sorted(self.profile_root.glob(f"*/{META_FILENAME}")):
            meta = self._read_yaml(meta_path)
            configuration = meta.get("configuration")
            if not configuration:
                continue
            try:
                configurations.append(ProfileTypeConfiguration.model_validate(configuration))
            except Exception as e:
                logger.warning(f"Ignoring invalid type configuration in {meta_path}: {e}")
        return configurations

    @property
    def configuration(self) -> ProfileTypeConfiguration | None:
        for configuration in self.configurations:
            if configuration.type == self.profile_type:
                return configuration
        return None

    def get_default_name(self) -> str | None:
        return self._load_meta().get("defaultProfile")

    def set_default(self, name: str | None) -> None:
        """Nominate (or clear, with None) the default profile for this type."""
        if name is not None and not self._profile_path(name).exists():
            raise ProfileNotFoundError(name, self.profile_type)
        meta = self._load_meta()
        meta["defaultProfile"] = name
        self._write_yaml(self.meta_path, meta)
        logger.info(f"Default {self.profile_type} profile set to {name}")

    # --- Profile Operations ---

    async def load(self, name: str | None = None, load_default: bool = False) -> Profile:
        """Load one profile by name, or the type's default.

        Raises:
            ProfileNotFoundError: If the named profile does not exist
            ProfileStoreError: If no default is configured or the file is unreadable
        """
        if load_default:
            name = self.get_default_name()
            if not name:
                raise ProfileStoreError(f"No default profile set for type {self.profile_type}")
        if not name:
            raise ProfileStoreError("A profile name or load_default is required")

        path = self._profile_path(name)
        if not path.exists():
            raise ProfileNotFoundError(name, self.profile_type)

        return Profile(name=name, type=self.profile_type, fields=self._read_yaml(path))

    async def load_all(self, type_only: bool = True) -> list[Profile]:
        """Load every profile of this type, sorted by name.

        With type_only=False, profiles of every type under the root are returned.
        """
        type_dirs = [self.type_dir] if type_only else sorted(p for p in self.profile_root.iterdir() if p.is_dir())

        profiles = []
        for type_dir in type_dirs:
            for path in sorted(type_dir.glob("*.yaml")):
                if path.name == META_FILENAME:
                    continue
                if not _is_valid_name(path.stem):
                    logger.warning(f"Skipping {path}: not a valid profile name")
                    continue
                profiles.append(Profile(name=path.stem, type=type_dir.name, fields=self._read_yaml(path)))
        return profiles

    async def save(self, profile: dict[str, Any], name: str, type: str, overwrite: bool = False) -> Profile:
        """Persist a new profile.

        Raises:
            ProfileStoreError: If the type does not match or the profile exists
            ProfileValidationError: If required schema fields are missing
        """
        if type != self.profile_type:
            raise ProfileStoreError(f"Cannot save {type} profile {name} in the {self.profile_type} store")

        path = self._profile_path(name)
        if path.exists() and not overwrite:
            raise ProfileStoreError(f"Profile {name} of type {type} already exists")

        fields = {k: v for k, v in profile.items() if k not in ("name", "type")}
        self._validate(name, fields)
        self._write_yaml(path, fields)

        if not self.get_default_name():
            self.set_default(name)

        logger.info(f"Saved {type} profile {name}")
        return Profile(name=name, type=type, fields=fields)

    async def update(self, name: str, merge: bool, profile: dict[str, Any]) -> Profile:
        """Update a stored profile.

        Args:
            name: Profile to update
            merge: Shallow-merge into the stored fields (True) or replace them (False)
            profile: New field values

        Raises:
            ProfileNotFoundError: If the profile does not exist
            ProfileValidationError: If required schema fields are missing
        """
        path = self._profile_path(name)
        if not path.exists():
            raise ProfileNotFoundError(name, self.profile_type)

        fields = self._read_yaml(path) if merge else {}
        fields.update({k: v for k, v in profile.items() if k not in ("name", "type")})
        self._validate(name, fields)
        self._write_yaml(path, fields)

        logger.info(f"Updated {self.profile_type} profile {name} (merge={merge})")
        return Profile(name=name, type=self.profile_type, fields=fields)

    async def delete(self, profile: Profile, name: str, type: str) -> Profile:
        """Delete a stored profile.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        path = self._profile_path(name)
        if type != self.profile_type or not path.exists():
            raise ProfileNotFoundError(name, type)

        deleted = Profile(name=name, type=type, fields=self._read_yaml(path))
        path.unlink()

        if self.get_default_name() == name:
            self.set_default(None)

        logger.info(f"Deleted {type} profile {name}")
        return deleted

    # --- Internals ---

    def _profile_path(self, name: str) -> Path:
        if not _is_valid_name(name):
            raise ProfileStoreError(f"Invalid profile name: {name!r}")
        return self.type_dir / f"{name}.yaml"

    def _validate(self, name: str, fields: dict[str, Any]) -> None:
        configuration = self.configuration
        if configuration is None:
            return
        missing = [key for key in configuration.schema_.required if fields.get(key) in (None, "")]
        if missing:
            raise ProfileValidationError(
                f"Profile {name} of type {self.profile_type} is missing required field(s): {', '.join(missing)}"
            )

    def _load_meta(self) -> dict[str, Any]:
        if not self.meta_path.exists():
            return {}
        return self._read_yaml(self.meta_path)

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ProfileStoreError(f"Failed to read {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ProfileStoreError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return data

    def _write_yaml(self, path: Path, data: dict[str, Any]) -> None:
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8")
            tmp_path.rename(path)
        except OSError as e:
            raise ProfileStoreError(f"Failed to write {path}: {e}") from e


def _is_valid_name(name: str) -> bool:
    return bool(name) and name == name.strip() and not name.startswith(".") and "/" not in name and "\\" not in name

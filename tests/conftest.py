"""
Shared pytest fixtures for the profile registry test suite.

Provides fixtures for:
- Temporary profile and settings storage
- Fake capabilities and a scripted prompter
- Registries wired to the YAML store
"""

from pathlib import Path
from typing import Any

import pytest
import yaml

from connection_profiles.config.settings import RegistrySettings
from connection_profiles.models.profiles import Profile
from connection_profiles.profiles.capabilities import CapabilityRegistry
from connection_profiles.profiles.registry import ProfileRegistry
from connection_profiles.trees.settings import TreeSettingsStore

ZOSMF_SCHEMA = {
    "type": "object",
    "title": "z/OSMF Profile",
    "properties": {
        "host": {"type": "string", "description": "The z/OSMF server host name."},
        "port": {"type": "number", "description": "The z/OSMF server port.", "default": 443},
        "user": {"type": "string", "description": "Mainframe user name."},
        "password": {"type": "string", "description": "Mainframe password."},
        "rejectUnauthorized": {"type": "boolean", "description": "Reject self-signed certificates."},
    },
    "required": [],
}


class FakeCapability:
    """Capability with canned answers that records how it was called."""

    def __init__(
        self,
        session: Any = "session",
        status: str = "active",
        details: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.session = session
        self.status = status
        self.details = details if details is not None else {"host": "example.com", "port": 443}
        self.error = error
        self.calls: list[tuple[str, tuple]] = []

    async def get_valid_session(self, profile, name, prompt_creds=None, force_prompt=None):
        self.calls.append(("get_valid_session", (profile.name, name, prompt_creds, force_prompt)))
        if self.error is not None:
            raise self.error
        return self.session

    async def get_status(self, profile, profile_type):
        self.calls.append(("get_status", (profile.name, profile_type)))
        if self.error is not None:
            raise self.error
        return self.status

    async def collect_profile_details(self, prompt_list, existing_fields, schema):
        self.calls.append(("collect_profile_details", (prompt_list, existing_fields, schema)))
        if self.error is not None:
            raise self.error
        return dict(self.details)


class ScriptedPrompter:
    """Prompter that answers from queues and records everything shown."""

    def __init__(self, picks: list[str | None] | None = None, answers: list[str | None] | None = None) -> None:
        self.picks = list(picks or [])
        self.answers = list(answers or [])
        self.pick_requests: list[tuple[list[str], str]] = []
        self.infos: list[str] = []
        self.errors: list[str] = []

    async def pick(self, items, placeholder):
        self.pick_requests.append((list(items), placeholder))
        return self.picks.pop(0) if self.picks else None

    async def ask(self, prompt, placeholder="", value=None):
        return self.answers.pop(0) if self.answers else None

    def show_info(self, message):
        self.infos.append(message)

    def show_error(self, message):
        self.errors.append(message)


def write_profile(root: Path, profile_type: str, name: str, fields: dict[str, Any]) -> Path:
    """Write a profile file directly, bypassing the store."""
    type_dir = root / profile_type
    type_dir.mkdir(parents=True, exist_ok=True)
    path = type_dir / f"{name}.yaml"
    path.write_text(yaml.safe_dump(fields))
    return path


def write_meta(
    root: Path,
    profile_type: str,
    default: str | None = None,
    schema: dict[str, Any] | None = None,
) -> Path:
    """Write a type's metadata file (default profile and configuration)."""
    type_dir = root / profile_type
    type_dir.mkdir(parents=True, exist_ok=True)
    meta: dict[str, Any] = {"defaultProfile": default}
    if schema is not None:
        meta["configuration"] = {"type": profile_type, "schema": schema}
    path = type_dir / ".meta.yaml"
    path.write_text(yaml.safe_dump(meta))
    return path


@pytest.fixture
def mock_storage_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CONNPROF_HOME at a temporary directory."""
    for var in ("CONNPROF_CONFIG_DIR", "CONNPROF_DEFAULT_TYPE", "CONNPROF_BASE_TYPE", "CONNPROF_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CONNPROF_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def settings(tmp_path: Path) -> RegistrySettings:
    return RegistrySettings(home=str(tmp_path / "home"))


@pytest.fixture
def profile_root(settings: RegistrySettings) -> Path:
    root = settings.profiles_path
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def seeded_root(profile_root: Path) -> Path:
    """Profile root with two zosmf profiles (A default), one base profile and a zosmf schema."""
    write_meta(profile_root, "zosmf", default="A", schema=ZOSMF_SCHEMA)
    write_profile(profile_root, "zosmf", "A", {"host": "a.example.com", "port": 443, "user": "ibmuser"})
    write_profile(profile_root, "zosmf", "B", {"host": "b.example.com", "port": 1443})
    write_meta(profile_root, "base", default="global")
    write_profile(profile_root, "base", "global", {"rejectUnauthorized": False})
    return profile_root


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def capabilities(capability: FakeCapability) -> CapabilityRegistry:
    registry = CapabilityRegistry()
    registry.register_api("zosmf", capability)
    return registry


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def tree_settings(settings: RegistrySettings) -> TreeSettingsStore:
    return TreeSettingsStore(settings.settings_path)


@pytest.fixture
def registry(
    seeded_root: Path,
    capabilities: CapabilityRegistry,
    prompter: ScriptedPrompter,
    tree_settings: TreeSettingsStore,
    settings: RegistrySettings,
) -> ProfileRegistry:
    """Registry over the seeded YAML store (not yet refreshed)."""
    return ProfileRegistry(
        capabilities=capabilities,
        prompter=prompter,
        tree_settings=tree_settings,
        settings=settings,
    )


@pytest.fixture
def profile_a() -> Profile:
    return Profile(name="A", type="zosmf", fields={"host": "a.example.com", "port": 443, "user": "ibmuser"})


@pytest.fixture
def make_profile(profile_root: Path):
    """Write profile files under the test profile root."""

    def _make(profile_type: str, name: str, fields: dict[str, Any]) -> Path:
        return write_profile(profile_root, profile_type, name, fields)

    return _make


@pytest.fixture
def make_meta(profile_root: Path):
    """Write type metadata files under the test profile root."""

    def _make(profile_type: str, default: str | None = None, schema: dict[str, Any] | None = None) -> Path:
        return write_meta(profile_root, profile_type, default=default, schema=schema)

    return _make


@pytest.fixture
def zosmf_schema() -> dict[str, Any]:
    return ZOSMF_SCHEMA

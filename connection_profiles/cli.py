"""Command line interface for managing connection profiles.

Provides commands to list, inspect, create, update and delete profiles
stored under CONNPROF_HOME.
"""

import asyncio
import logging
import sys
from typing import Any

import click
import yaml

from connection_profiles.config.loader import load_config
from connection_profiles.config.settings import RegistrySettings
from connection_profiles.models.profiles import Profile
from connection_profiles.models.profiles import ProfileUpdate
from connection_profiles.models.trees import TreeType
from connection_profiles.profiles.capabilities import CapabilityRegistry
from connection_profiles.profiles.errors import ProfileError
from connection_profiles.profiles.registry import DELETE_CHOICE
from connection_profiles.profiles.registry import ProfileRegistry
from connection_profiles.profiles.store import YamlProfileStore
from connection_profiles.trees.settings import TreeSettingsStore
from connection_profiles.trees.store import TreeStore

logger = logging.getLogger(__name__)

SECRET_FIELDS = ("password", "tokenValue")


class ClickPrompter:
    """Prompter backed by the terminal."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    async def pick(self, items: list[str], placeholder: str) -> str | None:
        if self.assume_yes and DELETE_CHOICE in items:
            return DELETE_CHOICE

        click.echo(placeholder)
        for index, item in enumerate(items, start=1):
            click.echo(f"  {index}. {item}")
        choice = click.prompt("Selection (0 to cancel)", type=click.IntRange(0, len(items)), default=0)
        return items[choice - 1] if choice else None

    async def ask(self, prompt: str, placeholder: str = "", value: str | None = None) -> str | None:
        answer = click.prompt(prompt, default=value or "", show_default=bool(value))
        return answer or None

    def show_info(self, message: str) -> None:
        click.echo(message)

    def show_error(self, message: str) -> None:
        click.echo(f"Error: {message}", err=True)


class SchemaPromptCapability:
    """Capability that collects profile fields from the terminal, one schema property at a time.

    It has no backend connection, so it cannot produce validated sessions.
    """

    async def get_valid_session(
        self,
        profile: Profile,
        name: str,
        prompt_creds: bool | None = None,
        force_prompt: bool | None = None,
    ) -> Any | None:
        return None

    async def get_status(self, profile: Profile, profile_type: str) -> str:
        return "inactive"

    async def collect_profile_details(
        self,
        prompt_list: list[str] | None,
        existing_fields: dict[str, Any] | None,
        schema: dict[str, Any] | None,
    ) -> dict[str, Any]:
        existing = existing_fields or {}
        details: dict[str, Any] = {}
        for key, prop in (schema or {}).items():
            if prompt_list is not None and key not in prompt_list:
                if key in existing:
                    details[key] = existing[key]
                continue
            details[key] = _prompt_for_property(key, prop, existing.get(key))
        return details


def _prompt_for_property(key: str, prop: dict[str, Any], current: Any) -> Any:
    label = prop.get("description") or key
    hide = key in SECRET_FIELDS
    default = current if current is not None else prop.get("default")

    if prop.get("type") == "boolean":
        return click.confirm(label, default=bool(default))
    if prop.get("type") == "number":
        value = click.prompt(label, default=default if default is not None else "", show_default=not hide)
        return int(value) if str(value).strip() else None

    value = click.prompt(
        label,
        default=default if default is not None else "",
        hide_input=hide,
        show_default=not hide,
    )
    return value or None


def build_registry(settings: RegistrySettings, assume_yes: bool = False) -> ProfileRegistry:
    """Compose a registry over the YAML store, registering every declared type."""
    capabilities = CapabilityRegistry()
    probe = YamlProfileStore(settings.profiles_path, settings.default_type)
    declared = [c.type for c in probe.configurations if c.type != settings.base_type]
    for profile_type in declared or [settings.default_type]:
        capabilities.register_api(profile_type, SchemaPromptCapability())

    return ProfileRegistry(
        capabilities=capabilities,
        prompter=ClickPrompter(assume_yes=assume_yes),
        tree_settings=TreeSettingsStore(settings.settings_path),
        settings=settings,
    )


def _load_registry(ctx: click.Context, assume_yes: bool = False) -> ProfileRegistry:
    registry = build_registry(ctx.obj["settings"], assume_yes=assume_yes)
    asyncio.run(registry.refresh())
    return registry


def _mask(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: ("****" if k in SECRET_FIELDS and v else v) for k, v in fields.items()}


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """Connection profiles - manage named connection profiles."""
    settings = load_config()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.pass_context
def types(ctx: click.Context):
    """Show declared and registered profile types."""
    registry = _load_registry(ctx)
    click.echo("Declared types: " + (", ".join(registry.get_all_types()) or "(none)"))
    click.echo("Registered types: " + ", ".join(registry.capabilities.registered_api_types()))


@cli.command(name="list")
@click.option("--type", "profile_type", default=None, help="Only list profiles of this type")
@click.pass_context
def list_profiles(ctx: click.Context, profile_type: str | None):
    """List loaded profiles (* marks a type's default)."""
    registry = _load_registry(ctx)
    profiles = (registry.get_profiles(profile_type) or []) if profile_type else registry.all_profiles

    if not profiles:
        click.echo("No profiles found")
        return

    for profile in profiles:
        default = registry.defaults.get_default_profile(profile.type)
        marker = "*" if default is not None and default.name == profile.name else " "
        click.echo(f"{marker} {profile.name} ({profile.type})")


@cli.command()
@click.pass_context
def defaults(ctx: click.Context):
    """Show the default profile of each type."""
    registry = _load_registry(ctx)
    for profile_type in registry.defaults.types():
        click.echo(f"{profile_type}: {registry.defaults.get_default_profile(profile_type).name}")


@cli.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str):
    """Show a profile's fields."""
    registry = _load_registry(ctx)
    try:
        profile = registry.load_named_profile(name)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{profile.name} ({profile.type})")
    click.echo(yaml.safe_dump(_mask(profile.fields), default_flow_style=False, sort_keys=False).rstrip())


@cli.command()
@click.argument("name")
@click.option("--type", "profile_type", default=None, help="Profile type (default: configured default type)")
@click.pass_context
def create(ctx: click.Context, name: str, profile_type: str | None):
    """Create a new connection profile."""
    registry = _load_registry(ctx)
    profile_type = profile_type or registry.settings.default_type
    basis = registry.defaults.get_default_profile(profile_type)

    if asyncio.run(registry.create_new_connection(basis, name, profile_type)) is None:
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.argument("assignments", nargs=-1)
@click.option("--unset", multiple=True, help="Field to remove")
@click.pass_context
def update(ctx: click.Context, name: str, assignments: tuple[str, ...], unset: tuple[str, ...]):
    """Update fields of a profile: KEY=VALUE to set, --unset KEY to remove."""
    patch: dict[str, Any] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            click.echo(f"Error: Expected KEY=VALUE, got {assignment!r}", err=True)
            sys.exit(2)
        patch[key.strip()] = yaml.safe_load(value) if value else ""
    for key in unset:
        patch[key] = None

    registry = _load_registry(ctx)
    updated = asyncio.run(registry.update_profile(ProfileUpdate(name=name, profile=patch)))
    if updated is None:
        sys.exit(1)
    click.echo(f"Profile {name} was updated.")


@cli.command()
@click.argument("name", required=False)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, name: str | None, yes: bool):
    """Delete a profile and remove it from saved sessions and favorites."""
    registry = _load_registry(ctx, assume_yes=yes)

    profile = None
    if name:
        try:
            profile = registry.load_named_profile(name)
        except ProfileError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    trees = [TreeStore.from_settings(t, registry.tree_settings.get(t.namespace)) for t in TreeType]
    if asyncio.run(registry.delete_profile(trees, profile)) is None:
        sys.exit(1)


@cli.command(name="set-default")
@click.argument("name")
@click.pass_context
def set_default(ctx: click.Context, name: str):
    """Make a profile the default for its type."""
    registry = _load_registry(ctx)
    try:
        profile = registry.load_named_profile(name)
        store = asyncio.run(registry.get_profile_manager(profile.type))
        store.set_default(profile.name)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"{profile.name} is now the default {profile.type} profile.")


def main():
    """Entry point for the connprof command."""
    cli(obj={})


if __name__ == "__main__":
    main()

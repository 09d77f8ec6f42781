"""Profile registry: loading, caching, validation and lifecycle of connection profiles.

The registry owns the in-memory list of loaded profiles, a per-type index,
the validation ledger and the default profile cache. It persists through
one profile store per type, validates through the capability registry and,
on deletion, cleans every consumer store it is handed.

Operations run on a single event loop. There are no locks: calls that
overlap at an await point interleave, and the later one wins for shared
state such as `valid_profile` and `all_profiles`.
"""

import logging
from collections.abc import Callable
from collections.abc import Sequence
from typing import Any

from connection_profiles.config.settings import RegistrySettings
from connection_profiles.models.profiles import Profile
from connection_profiles.models.profiles import ProfileStatus
from connection_profiles.models.profiles import ProfileUpdate
from connection_profiles.models.profiles import ProfileValidation
from connection_profiles.models.profiles import ValidProfile
from connection_profiles.models.trees import TreeType
from connection_profiles.profiles.capabilities import CapabilityRegistry
from connection_profiles.profiles.cleanup import purge_profile_from_tree
from connection_profiles.profiles.cleanup import purge_tree_settings
from connection_profiles.profiles.defaults import DefaultProfileCache
from connection_profiles.profiles.errors import MISSING_CREDENTIALS_MESSAGE
from connection_profiles.profiles.errors import ProfileError
from connection_profiles.profiles.errors import ProfileNotFoundError
from connection_profiles.profiles.prompts import Prompter
from connection_profiles.profiles.store import ProfileStore
from connection_profiles.profiles.store import YamlProfileStore
from connection_profiles.trees.settings import TreeSettingsStore
from connection_profiles.trees.store import ConsumerStore
from connection_profiles.utils.errors import error_handling

logger = logging.getLogger(__name__)

CREATE_NEW_CONNECTION = "＋ Create a New Connection"
DELETE_CHOICE = "Delete"
CANCEL_CHOICE = "Cancel"


class ProfileRegistry:
    """Authoritative in-memory view of all connection profiles.

    Construct one per application and hand it to consumers; use
    `create_instance` to construct and load in one step.
    """

    def __init__(
        self,
        capabilities: CapabilityRegistry,
        prompter: Prompter,
        tree_settings: TreeSettingsStore,
        settings: RegistrySettings | None = None,
        defaults: DefaultProfileCache | None = None,
        store_factory: Callable[[str], ProfileStore | None] | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            capabilities: Per-type backend capabilities
            prompter: Interactive prompt collaborator
            tree_settings: Persisted sessions/favorites of every tree domain
            settings: Registry settings (defaults to environment-derived settings)
            defaults: Default profile cache (a new one if omitted)
            store_factory: Builds the profile store for a type (YAML stores under
                settings.profiles_path if omitted)
        """
        self.settings = settings or RegistrySettings()
        self.capabilities = capabilities
        self.prompter = prompter
        self.tree_settings = tree_settings
        self.defaults = defaults or DefaultProfileCache()
        self.store_factory = store_factory or (lambda t: YamlProfileStore(self.settings.profiles_path, t))

        self.profiles_for_validation: list[ProfileValidation] = []
        self.all_profiles: list[Profile] = []
        self.loaded_profile: Profile | None = None
        self.valid_profile: ValidProfile = ValidProfile.INVALID

        self._all_types: list[str] = []
        self._profiles_by_type: dict[str, list[Profile]] = {}
        self._profile_manager_by_type: dict[str, ProfileStore] = {}

    @classmethod
    async def create_instance(cls, *args: Any, **kwargs: Any) -> "ProfileRegistry":
        """Construct a registry and load all profiles."""
        registry = cls(*args, **kwargs)
        await registry.refresh()
        return registry

    # --- Loading ---

    async def refresh(self) -> None:
        """Rebuild all profiles, the per-type index and the default cache from the stores.

        A type whose store fails to load is skipped; a type whose default
        fails to load is reported but keeps its profiles.
        """
        self.all_profiles = []
        self._all_types = []
        self._profiles_by_type = {}
        self.defaults.clear()

        base_type = self.settings.base_type
        try:
            manager = await self.get_profile_manager(base_type)
            if manager is not None:
                self.defaults.set_default_profile(base_type, await manager.load(load_default=True))
        except Exception as e:
            logger.warning(f"No default {base_type} profile loaded: {e}")

        for profile_type in self.capabilities.registered_api_types():
            try:
                manager = await self.get_profile_manager(profile_type)
                if manager is None:
                    continue
                profiles_for_type = await manager.load_all(type_only=True)
            except Exception as e:
                logger.error(f"Failed to load {profile_type} profiles: {e}")
                continue

            if profiles_for_type:
                self.all_profiles.extend(profiles_for_type)
                self._profiles_by_type[profile_type] = profiles_for_type
                try:
                    self.defaults.set_default_profile(profile_type, await manager.load(load_default=True))
                except Exception as e:
                    self.prompter.show_info(str(e))

            # Needs a store that has been instantiated with configuration metadata
            if not self._all_types:
                try:
                    configurations = manager.configurations
                except Exception as e:
                    logger.warning(f"Could not read {profile_type} type configurations: {e}")
                    configurations = []
                self._all_types = [configuration.type for configuration in configurations]

        self.profiles_for_validation.clear()
        logger.info(
            f"Loaded {len(self.all_profiles)} profiles across {len(self._profiles_by_type)} types "
            f"({len(self.defaults)} defaults)"
        )

    def load_named_profile(self, name: str, profile_type: str | None = None) -> Profile:
        """Find a loaded profile by name (and type, if given).

        Raises:
            ProfileNotFoundError: If no loaded profile matches
        """
        for profile in self.all_profiles:
            if profile.name == name and (profile_type is None or profile.type == profile_type):
                return profile
        raise ProfileNotFoundError(name, profile_type)

    def get_profiles(self, profile_type: str | None = None) -> list[Profile] | None:
        """Loaded profiles of a type, or None if the type was never populated."""
        return self._profiles_by_type.get(profile_type or self.settings.default_type)

    def get_all_types(self) -> list[str]:
        return self._all_types

    async def get_names_for_type(self, profile_type: str) -> list[str]:
        manager = await self.get_profile_manager(profile_type)
        if manager is None:
            return []
        return [profile.name for profile in await manager.load_all(type_only=True)]

    async def direct_load(self, profile_type: str, name: str) -> Profile | None:
        """Load a profile straight from its store, bypassing the in-memory cache."""
        manager = await self.get_profile_manager(profile_type)
        if manager is None:
            return None
        return await manager.load(name=name)

    async def get_profile_manager(self, profile_type: str) -> ProfileStore | None:
        """Return the store for a type, building and caching it on first use."""
        manager = self._profile_manager_by_type.get(profile_type)
        if manager is None:
            manager = self.store_factory(profile_type)
            if manager is None:
                return None
            self._profile_manager_by_type[profile_type] = manager
        return manager

    async def get_schema(self, profile_type: str) -> dict[str, Any] | None:
        """Schema properties declared for a profile type."""
        manager = await self.get_profile_manager(profile_type)
        if manager is None:
            return None
        schema = None
        for configuration in manager.configurations:
            if configuration.type == profile_type:
                schema = configuration.schema_.properties
        return schema

    async def get_profile_type(self) -> str | None:
        """Pick the type for a new profile; only prompts when there is a choice."""
        types = self.capabilities.registered_api_types()
        if types == [self.settings.default_type]:
            return types[0]
        return await self.prompter.pick(types, "Profile Type")

    # --- Validation ---

    async def check_current_profile(self, profile: Profile, prompt: bool = False) -> ProfileValidation:
        """Validate a profile's session and live status.

        Never raises: capability failures are reported and count as inactive.
        """
        try:
            capability = self.capabilities.get_common_api(profile)
            session = await capability.get_valid_session(profile, profile.name, None, prompt)
            if not session:
                # Credentials are invalid
                self.valid_profile = ValidProfile.INVALID
                result = ProfileValidation(status=ProfileStatus.INACTIVE, name=profile.name)
            else:
                status = await capability.get_status(profile, profile.type)
                if status == ProfileStatus.INACTIVE:
                    # Connection details are invalid
                    self.valid_profile = ValidProfile.INVALID
                    result = ProfileValidation(status=ProfileStatus.INACTIVE, name=profile.name)
                else:
                    self.valid_profile = ValidProfile.VALID
                    result = ProfileValidation(status=ProfileStatus.ACTIVE, name=profile.name, session=session)
        except Exception as e:
            error_handling(e, profile.name, "Error encountered in check_current_profile", self.prompter.show_error)
            self.valid_profile = ValidProfile.INVALID
            result = ProfileValidation(status=ProfileStatus.INACTIVE, name=profile.name)

        self.profiles_for_validation = [v for v in self.profiles_for_validation if v.name != profile.name]
        self.profiles_for_validation.append(result)
        return result

    # --- Creation ---

    async def create_session(self, tree: ConsumerStore) -> None:
        """Add a profile to a tree, offering to create a new connection first."""
        if tree.get_tree_type() == TreeType.USS:
            supported = self.capabilities.registered_uss_api_types()
        elif tree.get_tree_type() == TreeType.DATASET:
            supported = self.capabilities.registered_mvs_api_types()
        else:
            supported = self.capabilities.registered_jes_api_types()

        shown = {node.get_profile_name() for node in tree.session_nodes}
        names = [p.name for p in self.all_profiles if p.type in supported and p.name not in shown]

        choice = await self.prompter.pick(
            [CREATE_NEW_CONNECTION, *names],
            'Choose "Create new..." to define a new profile or select an existing profile to add',
        )
        if choice is None:
            self.prompter.show_info("No selection made.")
            return

        if choice != CREATE_NEW_CONNECTION:
            logger.debug(f"User selected profile {choice}")
            await tree.add_session(choice)
            return

        profile_name = await self.prompter.ask("Enter a name for the connection", "Connection Name")
        if not profile_name:
            self.prompter.show_info("Profile Name was not supplied. Operation Cancelled")
            return

        logger.debug("User created a new profile")
        basis = self.defaults.get_default_profile(self.settings.default_type)
        new_name = await self.create_new_connection(basis, profile_name.strip())
        if new_name:
            try:
                await self.refresh()
            except Exception as e:
                error_handling(e, new_name, notify=self.prompter.show_error)
            await tree.add_session(new_name)
            tree.refresh()

    async def create_new_connection(
        self,
        basis: Profile | None,
        profile_name: str,
        requested_type: str | None = None,
    ) -> str | None:
        """Collect fields for and persist a new profile.

        Args:
            basis: Profile whose fields seed the collected values (optional)
            profile_name: Name for the new profile (trimmed)
            requested_type: Profile type (defaults to settings.default_type)

        Returns:
            The new profile name, or None if the operation did not complete
        """
        new_name = profile_name.strip()
        if not new_name:
            self.prompter.show_info("Profile name was not supplied. Operation Cancelled")
            return None

        profile_type = requested_type or self.settings.default_type
        try:
            capability = self.capabilities.get_capability(profile_type)
            schema = await self.get_schema(profile_type)
            existing = dict(basis.fields) if basis is not None else {}
            details = dict(await capability.collect_profile_details(None, existing, schema))

            for credential in self.settings.credential_fields:
                if not details.get(credential):
                    details.pop(credential, None)

            for profile in self.all_profiles:
                if profile.name.lower() == new_name.lower():
                    self.prompter.show_error(
                        "Profile name already exists. Please create a profile using a different name"
                    )
                    return None

            await self.save_profile(details, new_name, profile_type)
            self.prompter.show_info(f"Profile {new_name} was created.")
            return new_name
        except Exception as e:
            error_handling(e, new_name, notify=self.prompter.show_error)
            return None

    async def save_profile(self, fields: dict[str, Any], name: str, profile_type: str) -> Profile:
        """Persist a new profile and add it to the loaded set.

        Raises:
            ProfileError: If no store exists for the type
            ProfileStoreError: If the store rejects the profile
        """
        manager = await self.get_profile_manager(profile_type)
        if manager is None:
            raise ProfileError(f"No profile store available for type {profile_type}")
        saved = await manager.save(profile=fields, name=name, type=profile_type)
        self.all_profiles.append(saved)
        self._profiles_by_type.setdefault(profile_type, []).append(saved)
        return saved

    # --- Editing ---

    async def edit_session(self, profile: Profile, profile_name: str) -> dict[str, Any] | None:
        """Re-collect a profile's details and persist them."""
        try:
            schema = await self.get_schema(profile.type)
            details = await self.capabilities.get_common_api(profile).collect_profile_details(
                None, dict(profile.fields), schema
            )
        except Exception as e:
            error_handling(e, profile_name, notify=self.prompter.show_error)
            return None

        fields = {**profile.fields, **details}
        updated = await self.update_profile(ProfileUpdate(name=profile_name, type=profile.type, profile=fields))
        if updated is not None:
            self.prompter.show_info("Profile was successfully updated")
        return updated

    async def update_profile(self, info: ProfileUpdate, re_prompt: bool = False) -> dict[str, Any] | None:
        """Merge a field patch onto a stored profile and persist it in full.

        A None value removes that field. When `info.type` is omitted the type
        is taken from the loaded profile with that name.

        Args:
            info: Field patch for one profile
            re_prompt: Pass the merged fields back through the capability for
                collection before persisting

        Returns:
            The persisted fields, or None if the update did not complete
        """
        try:
            profile_type = info.type or self._resolve_type(info.name)
            manager = await self.get_profile_manager(profile_type)
            if manager is None:
                raise ProfileError(f"No profile store available for type {profile_type}")
            self.loaded_profile = await manager.load(name=info.name)

            merged = dict(self.loaded_profile.fields)
            for key, value in info.profile.items():
                if value is None:
                    merged.pop(key, None)
                else:
                    merged[key] = value

            if re_prompt:
                capability = self.capabilities.get_common_api(self.loaded_profile)
                schema = await self.get_schema(profile_type)
                merged = dict(await capability.collect_profile_details(None, merged, schema))
        except Exception as e:
            error_handling(e, info.name, notify=self.prompter.show_error)
            return None

        try:
            updated = await manager.update(name=self.loaded_profile.name, merge=False, profile=merged)
        except Exception as e:
            # Credentials are optional, so a profile saved without them is fine
            if MISSING_CREDENTIALS_MESSAGE in str(e):
                logger.debug(f"Ignoring missing credentials for {info.name}")
            else:
                error_handling(e, info.name, notify=self.prompter.show_error)
            return None

        self.loaded_profile = updated
        self._replace_loaded(updated)
        logger.info(f"Updated profile {updated.name}")
        return updated.fields

    # --- Deletion ---

    async def get_delete_profile(self) -> Profile | None:
        """Prompt for the profile to delete."""
        names = [profile.name for profile in self.all_profiles]
        if not names:
            self.prompter.show_info("No profiles available")
            return None

        selected = await self.prompter.pick(names, "Select the profile you want to delete")
        if selected is None:
            self.prompter.show_info("Operation Cancelled")
            return None

        return next((profile for profile in self.all_profiles if profile.name == selected), None)

    async def delete_profile(self, trees: Sequence[ConsumerStore], profile: Profile | None = None) -> str | None:
        """Delete a profile from its store and remove it from every consumer store.

        The store deletion happens first; if it fails nothing else is touched.
        Cleanup of each consumer store and settings namespace is independent
        and a failure in one does not stop or undo the others.

        Args:
            trees: Consumer stores to clean
            profile: Profile to delete (prompted for if omitted)

        Returns:
            The deleted profile's name, or None if nothing was deleted
        """
        deleted = profile if profile is not None else await self.get_delete_profile()
        if deleted is None:
            return None

        name = deleted.name
        if not await self._confirm_delete(deleted):
            self.prompter.show_info("Operation Cancelled")
            return None

        try:
            await self._delete_profile_on_disk(deleted)
        except Exception as e:
            logger.error(f"Error encountered when deleting profile {name}: {e}")
            error_handling(e, name, notify=self.prompter.show_error)
            return None
        self.prompter.show_info(f"Profile {name} was deleted.")

        for tree in trees:
            try:
                purge_profile_from_tree(tree, name)
            except Exception as e:
                error_handling(e, name, f"Failed to remove {name} from {type(tree).__name__}", self.prompter.show_error)

        for tree_type in TreeType:
            try:
                purge_tree_settings(self.tree_settings, tree_type.namespace, name)
            except Exception as e:
                error_handling(e, name, f"Failed to update {tree_type.namespace} settings", self.prompter.show_error)

        self._forget(deleted)
        logger.info(f"Deleted profile {name}")
        return name

    async def _confirm_delete(self, profile: Profile) -> bool:
        logger.debug(f"Deleting profile {profile.name}")
        choice = await self.prompter.pick(
            [DELETE_CHOICE, CANCEL_CHOICE],
            f"Delete {profile.name}? This will permanently remove it from your system.",
        )
        if choice != DELETE_CHOICE:
            logger.debug("User picked Cancel. Cancelling delete of profile")
            return False
        return True

    async def _delete_profile_on_disk(self, profile: Profile) -> Profile:
        manager = await self.get_profile_manager(profile.type)
        if manager is None:
            raise ProfileError(f"No profile store available for type {profile.type}")
        return await manager.delete(profile=profile, name=profile.name, type=profile.type)

    # --- Cache maintenance ---

    def _resolve_type(self, name: str) -> str:
        types = {profile.type for profile in self.all_profiles if profile.name == name}
        if not types:
            raise ProfileNotFoundError(name)
        if len(types) > 1:
            raise ProfileError(f"Profile name {name} is ambiguous across types: {', '.join(sorted(types))}")
        return types.pop()

    def _replace_loaded(self, updated: Profile) -> None:
        def same(p: Profile) -> bool:
            return p.name == updated.name and p.type == updated.type

        self.all_profiles = [updated if same(p) else p for p in self.all_profiles]
        if updated.type in self._profiles_by_type:
            self._profiles_by_type[updated.type] = [
                updated if same(p) else p for p in self._profiles_by_type[updated.type]
            ]
        default = self.defaults.get_default_profile(updated.type)
        if default is not None and default.name == updated.name:
            self.defaults.set_default_profile(updated.type, updated)

    def _forget(self, deleted: Profile) -> None:
        def same(p: Profile) -> bool:
            return p.name == deleted.name and p.type == deleted.type

        self.all_profiles = [p for p in self.all_profiles if not same(p)]
        if deleted.type in self._profiles_by_type:
            self._profiles_by_type[deleted.type] = [p for p in self._profiles_by_type[deleted.type] if not same(p)]
        default = self.defaults.get_default_profile(deleted.type)
        if default is not None and default.name == deleted.name:
            self.defaults.set_default_profile(deleted.type, None)
        self.profiles_for_validation = [v for v in self.profiles_for_validation if v.name != deleted.name]

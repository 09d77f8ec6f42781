"""Capability registry.

Backend-specific behaviour (session validation, live status, schema-driven
field collection) is plugged in per profile type. Each type also declares
which tree axes it can serve: USS (file access), MVS (data set access) and
JES (job access).
"""

import logging
from dataclasses import dataclass
from typing import Any
from typing import Protocol

from connection_profiles.models.profiles import Profile
from connection_profiles.profiles.errors import CapabilityNotFoundError

logger = logging.getLogger(__name__)


class ProfileCapability(Protocol):
    """Operations a backend provides for profiles of its type."""

    async def get_valid_session(
        self,
        profile: Profile,
        name: str,
        prompt_creds: bool | None = None,
        force_prompt: bool | None = None,
    ) -> Any | None:
        """Return a validated session, or None when none can be obtained."""
        ...

    async def get_status(self, profile: Profile, profile_type: str) -> str:
        """Return "active" or "inactive"."""
        ...

    async def collect_profile_details(
        self,
        prompt_list: list[str] | None,
        existing_fields: dict[str, Any] | None,
        schema: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """Collect and normalize field values against a type's schema properties."""
        ...


@dataclass
class _Registration:
    capability: ProfileCapability
    uss: bool
    mvs: bool
    jes: bool


class CapabilityRegistry:
    """Registered capabilities keyed by profile type, in registration order."""

    def __init__(self) -> None:
        self._registrations: dict[str, _Registration] = {}

    def register_api(
        self,
        profile_type: str,
        capability: ProfileCapability,
        uss: bool = True,
        mvs: bool = True,
        jes: bool = True,
    ) -> None:
        """Register (or replace) the capability for a profile type."""
        if profile_type in self._registrations:
            logger.warning(f"Replacing capability registered for type {profile_type}")
        self._registrations[profile_type] = _Registration(capability, uss, mvs, jes)
        logger.debug(f"Registered capability for {profile_type} (uss={uss}, mvs={mvs}, jes={jes})")

    def registered_api_types(self) -> list[str]:
        return list(self._registrations)

    def registered_uss_api_types(self) -> list[str]:
        return [t for t, r in self._registrations.items() if r.uss]

    def registered_mvs_api_types(self) -> list[str]:
        return [t for t, r in self._registrations.items() if r.mvs]

    def registered_jes_api_types(self) -> list[str]:
        return [t for t, r in self._registrations.items() if r.jes]

    def get_capability(self, profile_type: str) -> ProfileCapability:
        registration = self._registrations.get(profile_type)
        if registration is None:
            raise CapabilityNotFoundError(f"No capability registered for profile type: {profile_type}")
        return registration.capability

    def get_common_api(self, profile: Profile) -> ProfileCapability:
        """Return the capability serving a profile's type.

        Raises:
            CapabilityNotFoundError: If the profile's type is not registered
        """
        return self.get_capability(profile.type)

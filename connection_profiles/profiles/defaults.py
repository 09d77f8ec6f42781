"""Default profile cache.

Maps each profile type to the profile its configuration nominates as
default. Rebuilt from scratch on every registry refresh.
"""

import logging

from connection_profiles.models.profiles import Profile

logger = logging.getLogger(__name__)


class DefaultProfileCache:
    """Process-wide mapping of profile type to default profile."""

    def __init__(self) -> None:
        self._defaults: dict[str, Profile] = {}

    def set_default_profile(self, profile_type: str, profile: Profile | None) -> None:
        """Record the default for a type; None removes any previous entry."""
        if profile is None:
            self._defaults.pop(profile_type, None)
            return
        self._defaults[profile_type] = profile
        logger.debug(f"Default profile for {profile_type}: {profile.name}")

    def get_default_profile(self, profile_type: str) -> Profile | None:
        return self._defaults.get(profile_type)

    def clear(self) -> None:
        self._defaults.clear()

    def types(self) -> list[str]:
        return list(self._defaults)

    def __contains__(self, profile_type: object) -> bool:
        return profile_type in self._defaults

    def __len__(self) -> int:
        return len(self._defaults)

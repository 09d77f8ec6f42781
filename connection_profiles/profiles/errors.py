"""Domain exceptions for the profile registry."""

# Fragment of the store message raised when a profile has neither user and
# password nor encoded credentials. Credentials are optional, so updates
# that fail only for this reason are not reported.
MISSING_CREDENTIALS_MESSAGE = "Must have user & password OR base64 encoded credentials"


class ProfileError(RuntimeError):
    """Base error for profile registry operations."""


class ProfileNotFoundError(ProfileError):
    """Raised when a named profile is not loaded or not stored."""

    def __init__(self, name: str, profile_type: str | None = None) -> None:
        self.name = name
        self.profile_type = profile_type
        if profile_type:
            super().__init__(f"Could not find profile named: {name} (type: {profile_type}).")
        else:
            super().__init__(f"Could not find profile named: {name}.")


class ProfileStoreError(ProfileError):
    """Raised when the profile store cannot load, save, update or delete."""


class ProfileValidationError(ProfileStoreError):
    """Raised when a profile is missing fields its type's schema requires."""


class CapabilityNotFoundError(ProfileError):
    """Raised when no capability is registered for a profile type."""

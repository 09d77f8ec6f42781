"""Profile registry and its collaborators.

Public Interface:
    - ProfileRegistry: Loads, validates, creates, edits and deletes profiles
    - YamlProfileStore: On-disk per-type profile store
    - CapabilityRegistry: Per-type backend capabilities
    - DefaultProfileCache: Default profile per type
"""

from .capabilities import CapabilityRegistry
from .capabilities import ProfileCapability
from .defaults import DefaultProfileCache
from .errors import CapabilityNotFoundError
from .errors import ProfileError
from .errors import ProfileNotFoundError
from .errors import ProfileStoreError
from .errors import ProfileValidationError
from .prompts import Prompter
from .registry import ProfileRegistry
from .store import ProfileStore
from .store import YamlProfileStore

__all__ = [
    "CapabilityNotFoundError",
    "CapabilityRegistry",
    "DefaultProfileCache",
    "ProfileCapability",
    "ProfileError",
    "ProfileNotFoundError",
    "ProfileRegistry",
    "ProfileStore",
    "ProfileStoreError",
    "ProfileValidationError",
    "Prompter",
    "YamlProfileStore",
]

"""Connection profile registry.

Loads, caches, validates, creates, edits and deletes named connection
profiles, and keeps the consumer stores that display them consistent.

Public Interface:
    Modules:
    - config: Settings loading
    - storage: Directory resolution
    - models: Shared data structures
    - profiles: Registry, stores and capabilities
    - trees: Consumer stores and persisted tree settings
"""

from .models import Profile
from .models import ProfileValidation
from .models import ValidProfile
from .profiles import ProfileRegistry

__all__ = [
    "Profile",
    "ProfileRegistry",
    "ProfileValidation",
    "ValidProfile",
]

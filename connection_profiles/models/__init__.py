"""Models for the profile registry."""

from .profiles import Profile
from .profiles import ProfileStatus
from .profiles import ProfileTypeConfiguration
from .profiles import ProfileTypeSchema
from .profiles import ProfileUpdate
from .profiles import ProfileValidation
from .profiles import ValidProfile
from .trees import TreeSettings
from .trees import TreeType

__all__ = [
    "Profile",
    "ProfileStatus",
    "ProfileTypeConfiguration",
    "ProfileTypeSchema",
    "ProfileUpdate",
    "ProfileValidation",
    "TreeSettings",
    "TreeType",
    "ValidProfile",
]

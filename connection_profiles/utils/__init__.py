"""Utility helpers shared across the registry."""

from .errors import error_handling
from .labels import extract_profile_token
from .labels import label_matches

__all__ = [
    "error_handling",
    "extract_profile_token",
    "label_matches",
]

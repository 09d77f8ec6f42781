"""Consumer stores and their persisted settings."""

from .settings import TreeSettingsError
from .settings import TreeSettingsStore
from .store import ConsumerStore
from .store import FavoriteNode
from .store import SessionNode
from .store import TreeStore

__all__ = [
    "ConsumerStore",
    "FavoriteNode",
    "SessionNode",
    "TreeSettingsError",
    "TreeSettingsStore",
    "TreeStore",
]

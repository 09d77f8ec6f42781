"""Consumer stores.

A consumer store is one presentation domain's view of the profiles: a list
of session nodes, a favorites list and a history list. The registry only
mutates a store through the store's own operations so the store can keep
its derived state (dirty flags, refresh requests) consistent.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from connection_profiles.models.profiles import Profile
from connection_profiles.models.trees import TreeSettings
from connection_profiles.models.trees import TreeType
from connection_profiles.utils.labels import extract_profile_token

logger = logging.getLogger(__name__)


@dataclass
class SessionNode:
    """Top-level tree node. Non-profile nodes (e.g. the favorites folder) have no profile name."""

    label: str
    profile_name: str | None = None
    dirty: bool = False

    def get_profile_name(self) -> str | None:
        return self.profile_name


@dataclass
class FavoriteNode:
    """Favorite entry, labelled "[profile]: item"."""

    label: str
    dirty: bool = False

    @property
    def profile_name(self) -> str | None:
        return extract_profile_token(self.label)


class ConsumerStore(Protocol):
    session_nodes: list[SessionNode]
    favorites: list[FavoriteNode]

    def get_tree_type(self) -> TreeType: ...

    def get_file_history(self) -> list[str]: ...

    def remove_file_history(self, entry: str) -> None: ...

    def remove_favorite(self, node: FavoriteNode) -> None: ...

    def hide_session(self, node: SessionNode) -> None: ...

    def refresh(self) -> None: ...

    async def add_session(self, name_or_profile: str | Profile) -> None: ...


class TreeStore:
    """In-memory consumer store for one tree domain."""

    def __init__(self, tree_type: TreeType) -> None:
        self.tree_type = tree_type
        self.session_nodes: list[SessionNode] = [SessionNode(label="Favorites")]
        self.favorites: list[FavoriteNode] = []
        self.hidden_sessions: list[SessionNode] = []
        self._history: list[str] = []
        self.refresh_count = 0

    @classmethod
    def from_settings(cls, tree_type: TreeType, settings: TreeSettings) -> "TreeStore":
        """Build a store showing the persisted sessions and favorites of a domain."""
        store = cls(tree_type)
        for name in settings.sessions:
            store.session_nodes.append(SessionNode(label=name.strip(), profile_name=name.strip()))
        store.favorites.extend(FavoriteNode(label=label) for label in settings.favorites)
        return store

    def get_tree_type(self) -> TreeType:
        return self.tree_type

    # --- Sessions ---

    async def add_session(self, name_or_profile: str | Profile) -> None:
        name = name_or_profile.name if isinstance(name_or_profile, Profile) else name_or_profile
        if any(node.get_profile_name() == name for node in self.session_nodes):
            logger.debug(f"Session {name} already shown in {self.tree_type.name} tree")
            return
        self.session_nodes.append(SessionNode(label=name, profile_name=name))
        logger.debug(f"Added session {name} to {self.tree_type.name} tree")

    def hide_session(self, node: SessionNode) -> None:
        """Remove a session node from view without deleting its profile."""
        if node in self.session_nodes:
            self.session_nodes.remove(node)
            self.hidden_sessions.append(node)

    # --- Favorites ---

    def add_favorite(self, label: str) -> FavoriteNode:
        node = FavoriteNode(label=label)
        self.favorites.append(node)
        return node

    def remove_favorite(self, node: FavoriteNode) -> None:
        if node in self.favorites:
            self.favorites.remove(node)

    # --- History ---

    def get_file_history(self) -> list[str]:
        return list(self._history)

    def add_file_history(self, entry: str) -> None:
        if entry in self._history:
            self._history.remove(entry)
        self._history.insert(0, entry)

    def remove_file_history(self, entry: str) -> None:
        if entry in self._history:
            self._history.remove(entry)

    def refresh(self) -> None:
        self.refresh_count += 1

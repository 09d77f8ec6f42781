"""Removal of a deleted profile's identity from consumer stores.

History entries are matched against the upper-cased profile name, while
favorites, session nodes and persisted settings are matched exactly.
Each helper only calls the store's own mutators.
"""

import logging

from connection_profiles.models.trees import TreeSettings
from connection_profiles.trees.settings import TreeSettingsStore
from connection_profiles.trees.store import ConsumerStore
from connection_profiles.utils.labels import extract_profile_token
from connection_profiles.utils.labels import label_matches

logger = logging.getLogger(__name__)


def purge_history(tree: ConsumerStore, profile_name: str) -> int:
    """Remove history entries recorded against a profile."""
    token = profile_name.upper()
    stale = [entry for entry in reversed(tree.get_file_history()) if extract_profile_token(entry) == token]
    for entry in stale:
        tree.remove_file_history(entry)
    return len(stale)


def purge_favorites(tree: ConsumerStore, profile_name: str) -> int:
    """Remove favorites labelled with a profile."""
    removed = 0
    for node in list(tree.favorites):
        if label_matches(node.label, profile_name):
            tree.remove_favorite(node)
            node.dirty = True
            tree.refresh()
            removed += 1
    return removed


def purge_sessions(tree: ConsumerStore, profile_name: str) -> int:
    """Hide session nodes owned by a profile."""
    hidden = 0
    for node in list(tree.session_nodes):
        if node.get_profile_name() == profile_name:
            tree.hide_session(node)
            node.dirty = True
            tree.refresh()
            hidden += 1
    return hidden


def purge_profile_from_tree(tree: ConsumerStore, profile_name: str) -> None:
    """Remove every history, favorite and session trace of a profile from one store."""
    history = purge_history(tree, profile_name)
    favorites = purge_favorites(tree, profile_name)
    sessions = purge_sessions(tree, profile_name)
    logger.debug(
        f"Purged {profile_name} from {tree.get_tree_type().name} tree: "
        f"{history} history, {favorites} favorites, {sessions} sessions"
    )


def filter_tree_settings(settings: TreeSettings, profile_name: str) -> TreeSettings:
    return settings.model_copy(
        update={
            "sessions": [s for s in settings.sessions if s.strip() != profile_name],
            "favorites": [f for f in settings.favorites if not label_matches(f, profile_name)],
        }
    )


def purge_tree_settings(settings_store: TreeSettingsStore, namespace: str, profile_name: str) -> None:
    """Drop a profile from one namespace's persisted sessions and favorites."""
    current = settings_store.get(namespace)
    settings_store.update(namespace, filter_tree_settings(current, profile_name))

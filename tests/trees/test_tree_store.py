"""Tests for in-memory consumer stores and persisted tree settings."""

from pathlib import Path

import pytest
import yaml

from connection_profiles.models.profiles import Profile
from connection_profiles.models.trees import TreeSettings
from connection_profiles.models.trees import TreeType
from connection_profiles.trees.settings import TreeSettingsError
from connection_profiles.trees.settings import TreeSettingsStore
from connection_profiles.trees.store import FavoriteNode
from connection_profiles.trees.store import TreeStore


@pytest.mark.unit
class TestTreeStore:
    """Sessions, favorites and history of a single tree."""

    def test_starts_with_favorites_folder(self) -> None:
        """Test a new store shows only the favorites folder."""
        tree = TreeStore(TreeType.JOB)

        assert [n.label for n in tree.session_nodes] == ["Favorites"]
        assert tree.session_nodes[0].get_profile_name() is None
        assert tree.get_tree_type() is TreeType.JOB

    @pytest.mark.asyncio
    async def test_add_session_dedupes(self) -> None:
        """Test a profile is shown at most once, by name or by profile."""
        tree = TreeStore(TreeType.USS)

        await tree.add_session("sys1")
        await tree.add_session(Profile(name="sys1", type="zosmf"))
        await tree.add_session(Profile(name="sys2", type="zosmf"))

        assert [n.get_profile_name() for n in tree.session_nodes] == [None, "sys1", "sys2"]

    def test_hide_session(self) -> None:
        """Test hiding moves a node out of view."""
        tree = TreeStore.from_settings(TreeType.USS, TreeSettings(sessions=["sys1"]))
        node = tree.session_nodes[1]

        tree.hide_session(node)

        assert node not in tree.session_nodes
        assert tree.hidden_sessions == [node]

    def test_favorite_profile_name(self) -> None:
        """Test a favorite exposes its label's profile token."""
        assert FavoriteNode(label="[sys1]: USER.DATA").profile_name == "sys1"
        assert FavoriteNode(label="USER.DATA").profile_name is None

    def test_add_and_remove_favorite(self) -> None:
        tree = TreeStore(TreeType.DATASET)
        node = tree.add_favorite("[sys1]: USER.DATA")

        tree.remove_favorite(node)
        tree.remove_favorite(node)

        assert tree.favorites == []

    def test_history_most_recent_first(self) -> None:
        """Test history keeps one copy of each entry, newest first."""
        tree = TreeStore(TreeType.DATASET)
        tree.add_file_history("[sys1] A")
        tree.add_file_history("[sys1] B")
        tree.add_file_history("[sys1] A")

        assert tree.get_file_history() == ["[sys1] A", "[sys1] B"]

    def test_history_is_returned_as_copy(self) -> None:
        """Test callers cannot mutate history through the returned list."""
        tree = TreeStore(TreeType.DATASET)
        tree.add_file_history("[sys1] A")

        tree.get_file_history().clear()
        tree.remove_file_history("missing")

        assert tree.get_file_history() == ["[sys1] A"]

    def test_from_settings(self) -> None:
        """Test a store is rebuilt from persisted sessions and favorites."""
        tree = TreeStore.from_settings(
            TreeType.DATASET,
            TreeSettings(sessions=[" sys1 ", "sys2"], favorites=["[sys1]: A"]),
        )

        assert [n.get_profile_name() for n in tree.session_nodes] == [None, "sys1", "sys2"]
        assert [f.label for f in tree.favorites] == ["[sys1]: A"]


@pytest.mark.unit
class TestTreeSettingsStore:
    """Namespace-scoped persisted settings."""

    def test_unset_namespace_is_empty(self, tmp_path: Path) -> None:
        """Test reading before anything is written."""
        store = TreeSettingsStore(tmp_path / "config" / "settings.yaml")

        assert store.get(TreeType.DATASET.namespace) == TreeSettings()

    def test_update_replaces_namespace(self, tmp_path: Path) -> None:
        """Test each namespace is written as a whole and others are kept."""
        path = tmp_path / "config" / "settings.yaml"
        store = TreeSettingsStore(path)

        store.update(TreeType.DATASET.namespace, TreeSettings(sessions=["sys1"], favorites=["[sys1]: A"]))
        store.update(TreeType.USS.namespace, TreeSettings(sessions=["sys2"]))
        store.update(TreeType.DATASET.namespace, TreeSettings(sessions=["sys3"]))

        assert store.get(TreeType.DATASET.namespace) == TreeSettings(sessions=["sys3"])
        assert store.get(TreeType.USS.namespace).sessions == ["sys2"]
        assert set(yaml.safe_load(path.read_text())) == {"Zowe-DS-Persistent", "Zowe-USS-Persistent"}
        assert not path.with_suffix(".tmp").exists()

    def test_get_returns_copy(self, tmp_path: Path) -> None:
        """Test mutating a returned value does not change what is stored."""
        store = TreeSettingsStore(tmp_path / "settings.yaml")
        store.update(TreeType.JOB.namespace, TreeSettings(sessions=["sys1"]))

        store.get(TreeType.JOB.namespace).sessions.append("sys2")

        assert store.get(TreeType.JOB.namespace).sessions == ["sys1"]

    def test_other_keys_round_trip(self, tmp_path: Path) -> None:
        """Test keys besides sessions and favorites are written back unchanged."""
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump({"Zowe-DS-Persistent": {"sessions": ["sys1"], "fileHistory": ["[sys1]: A"]}}))
        store = TreeSettingsStore(path)

        current = store.get(TreeType.DATASET.namespace)
        store.update(TreeType.DATASET.namespace, current.model_copy(update={"sessions": []}))

        assert yaml.safe_load(path.read_text())["Zowe-DS-Persistent"] == {
            "sessions": [],
            "favorites": [],
            "fileHistory": ["[sys1]: A"],
        }

    def test_unreadable_file(self, tmp_path: Path) -> None:
        """Test malformed YAML is reported as a settings error."""
        path = tmp_path / "settings.yaml"
        path.write_text("Zowe-DS-Persistent: [unclosed\n")

        with pytest.raises(TreeSettingsError, match="Failed to read"):
            TreeSettingsStore(path).get(TreeType.DATASET.namespace)

    def test_unwritable_file(self, tmp_path: Path) -> None:
        """Test a failed write is reported as a settings error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = TreeSettingsStore(blocker / "settings.yaml")

        with pytest.raises(TreeSettingsError, match="Failed to write"):
            store.update(TreeType.JOB.namespace, TreeSettings(sessions=["sys1"]))

"""Tests for buildfeed-store implementations."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import yaml

from buildfeed_store.base import StoreError
from buildfeed_store.config_file import ConfigStore
from buildfeed_store.gist import GistStore
from buildfeed_store.models import AuthorEntry, upsert
from buildfeed_store.sqlite import SQLiteStore


def _names(entries):
    return [(e.member_name, e.handle) for e in entries]


# ---------------------------------------------------------------------------
# models
# ---------------------------------------------------------------------------


class TestUpsert:
    def test_appends_new_member(self):
        entries = [AuthorEntry("Alice", "a")]
        assert _names(upsert(entries, AuthorEntry("Bob", "b"))) == [("Alice", "a"), ("Bob", "b")]

    def test_replaces_in_place(self):
        entries = [AuthorEntry("Alice", "a"), AuthorEntry("Bob", "b")]
        assert _names(upsert(entries, AuthorEntry("Alice", "a2"))) == [("Alice", "a2"), ("Bob", "b")]

    def test_from_dict_tolerates_missing_keys(self):
        assert AuthorEntry.from_dict({"member_name": "Alice"}) == AuthorEntry("Alice", "")


# ---------------------------------------------------------------------------
# ConfigStore
# ---------------------------------------------------------------------------


class TestConfigStore:
    def test_missing_file_lists_empty(self, tmp_path):
        assert ConfigStore(str(tmp_path / "nope.yml")).list_authors() == []

    def test_save_and_list_preserves_order(self, tmp_path):
        store = ConfigStore(str(tmp_path / ".buildfeed.yml"))
        store.save(AuthorEntry("Bob", "bob_w"))
        store.save(AuthorEntry("Alice", "alice_w"))
        assert _names(store.list_authors()) == [("Bob", "bob_w"), ("Alice", "alice_w")]

    def test_save_keeps_other_config_keys(self, tmp_path):
        path = tmp_path / ".buildfeed.yml"
        path.write_text("store: config\nnotify:\n  success: true\n")
        ConfigStore(str(path)).save(AuthorEntry("Alice", "alice_w"))

        data = yaml.safe_load(path.read_text())
        assert data["store"] == "config"
        assert data["notify"] == {"success": True}
        assert data["authors"] == [{"member_name": "Alice", "handle": "alice_w"}]

    def test_save_existing_member_updates_handle(self, tmp_path):
        store = ConfigStore(str(tmp_path / ".buildfeed.yml"))
        store.save(AuthorEntry("Alice", "old"))
        store.save(AuthorEntry("Bob", "bob_w"))
        store.save(AuthorEntry("Alice", "new"))
        assert _names(store.list_authors()) == [("Alice", "new"), ("Bob", "bob_w")]

    def test_non_ascii_names_round_trip(self, tmp_path):
        store = ConfigStore(str(tmp_path / ".buildfeed.yml"))
        store.save(AuthorEntry("张三", "zhangsan"))
        assert _names(store.list_authors()) == [("张三", "zhangsan")]

    def test_remove(self, tmp_path):
        store = ConfigStore(str(tmp_path / ".buildfeed.yml"))
        store.save(AuthorEntry("Alice", "alice_w"))
        assert store.remove("Alice") is True
        assert store.remove("Alice") is False
        assert store.list_authors() == []

    def test_invalid_authors_section_lists_empty(self, tmp_path):
        path = tmp_path / ".buildfeed.yml"
        path.write_text("authors: not-a-list\n")
        assert ConfigStore(str(path)).list_authors() == []

    def test_unparseable_yaml_lists_empty(self, tmp_path):
        path = tmp_path / ".buildfeed.yml"
        path.write_text("authors: [unclosed\n")
        assert ConfigStore(str(path)).list_authors() == []

    def test_save_to_unparseable_yaml_raises_store_error(self, tmp_path):
        path = tmp_path / ".buildfeed.yml"
        path.write_text("templates: [unclosed\n")
        with pytest.raises(StoreError, match="Could not update"):
            ConfigStore(str(path)).save(AuthorEntry("Alice", "alice_w"))
        assert path.read_text() == "templates: [unclosed\n"

    def test_save_to_non_mapping_file_raises_store_error(self, tmp_path):
        path = tmp_path / ".buildfeed.yml"
        path.write_text("- just\n- a list\n")
        store = ConfigStore(str(path))
        assert store.list_authors() == []
        with pytest.raises(StoreError, match="mapping"):
            store.save(AuthorEntry("Alice", "alice_w"))


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_save_and_list(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(AuthorEntry("Bob", "bob_w"))
        store.save(AuthorEntry("Alice", "alice_w"))
        assert _names(store.list_authors()) == [("Bob", "bob_w"), ("Alice", "alice_w")]
        store.close()

    def test_upsert_keeps_position(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(AuthorEntry("Alice", "old"))
        store.save(AuthorEntry("Bob", "bob_w"))
        store.save(AuthorEntry("Alice", "new"))
        assert _names(store.list_authors()) == [("Alice", "new"), ("Bob", "bob_w")]
        store.close()

    def test_remove(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(AuthorEntry("Alice", "alice_w"))
        assert store.remove("Alice") is True
        assert store.remove("Alice") is False
        assert store.list_authors() == []
        store.close()

    def test_persists_across_connections(self, tmp_path):
        db = str(tmp_path / "test.db")
        store = SQLiteStore(db_path=db)
        store.save(AuthorEntry("Alice", "alice_w"))
        store.close()

        reopened = SQLiteStore(db_path=db)
        assert _names(reopened.list_authors()) == [("Alice", "alice_w")]
        reopened.close()


# ---------------------------------------------------------------------------
# GistStore
# ---------------------------------------------------------------------------


def _gist_with(records):
    gist = MagicMock()
    if records is None:
        gist.files = {}
    else:
        gist.files = {"buildfeed_authors.json": MagicMock(content=json.dumps(records))}
    return gist


def _store_returning(gist):
    with patch("github.Github") as mock_github:
        mock_github.return_value.get_gist.return_value = gist
        store = GistStore(gist_id="abc123", token="tok")
    return store


class TestGistStore:
    def test_list_authors_reads_json(self):
        store = _store_returning(_gist_with([{"member_name": "Alice", "handle": "alice_w"}]))
        assert _names(store.list_authors()) == [("Alice", "alice_w")]

    def test_list_authors_without_file_is_empty(self):
        assert _store_returning(_gist_with(None)).list_authors() == []

    def test_list_authors_on_api_error_is_empty(self):
        with patch("github.Github") as mock_github:
            mock_github.return_value.get_gist.side_effect = Exception("404")
            store = GistStore(gist_id="abc123", token="tok")
        assert store.list_authors() == []

    def test_save_appends_and_edits_gist(self):
        gist = _gist_with([{"member_name": "Alice", "handle": "alice_w"}])
        store = _store_returning(gist)
        store.save(AuthorEntry("Bob", "bob_w"))

        files = gist.edit.call_args.kwargs["files"]
        written = json.loads(files["buildfeed_authors.json"]["content"])
        assert written == [
            {"member_name": "Alice", "handle": "alice_w"},
            {"member_name": "Bob", "handle": "bob_w"},
        ]

    def test_save_failure_raises_store_error(self):
        gist = _gist_with([])
        gist.edit.side_effect = Exception("403 Forbidden")
        store = _store_returning(gist)
        with pytest.raises(StoreError, match="403 Forbidden"):
            store.save(AuthorEntry("Bob", "bob_w"))

    def test_save_when_gist_unreachable_raises_store_error(self):
        with patch("github.Github") as mock_github:
            mock_github.return_value.get_gist.side_effect = RuntimeError("403 no gist scope")
            store = GistStore(gist_id="abc123", token="tok")
        with pytest.raises(StoreError, match="no gist scope"):
            store.save(AuthorEntry("Jane", "jane"))

    def test_remove_failure_raises_store_error(self):
        gist = _gist_with([{"member_name": "Alice", "handle": "alice_w"}])
        gist.edit.side_effect = Exception("502 Bad Gateway")
        store = _store_returning(gist)
        with pytest.raises(StoreError):
            store.remove("Alice")

    def test_remove_rewrites_without_member(self):
        gist = _gist_with(
            [{"member_name": "Alice", "handle": "alice_w"}, {"member_name": "Bob", "handle": "bob_w"}]
        )
        store = _store_returning(gist)
        assert store.remove("Alice") is True

        written = json.loads(gist.edit.call_args.kwargs["files"]["buildfeed_authors.json"]["content"])
        assert written == [{"member_name": "Bob", "handle": "bob_w"}]

    def test_remove_missing_member_does_not_write(self):
        gist = _gist_with([])
        store = _store_returning(gist)
        assert store.remove("Alice") is False
        gist.edit.assert_not_called()

"""Tests for the author directory snapshot."""

from buildfeed_core.models import AuthorDirectory


class TestAuthorDirectory:
    def test_lookup_hit_and_miss(self):
        directory = AuthorDirectory({"Alice": "alice_w"})
        assert directory.lookup("Alice") == "alice_w"
        assert directory.lookup("Bob") is None

    def test_from_pairs_skips_blank_names_and_handles(self):
        directory = AuthorDirectory.from_pairs([("Alice", "alice_w"), ("", "ghost"), ("Bob", "")])
        assert list(directory) == ["Alice"]

    def test_from_pairs_later_entry_wins(self):
        directory = AuthorDirectory.from_pairs([("Alice", "old"), ("Alice", "new")])
        assert directory.lookup("Alice") == "new"
        assert len(directory) == 1

    def test_snapshot_is_isolated_from_source_dict(self):
        source = {"Alice": "alice_w"}
        directory = AuthorDirectory(source)
        source["Bob"] = "bob_w"
        assert "Bob" not in directory

    def test_empty_directory(self):
        directory = AuthorDirectory()
        assert len(directory) == 0
        assert directory.lookup("Alice") is None

"""GistStore: team-shared author directory in a GitHub Gist.

Every CI agent that can read the Gist sees the same name → handle mapping,
without the mapping living in each repository.

Data format: a single JSON file named `buildfeed_authors.json` inside the
Gist, holding an array of {"member_name": ..., "handle": ...} objects.
"""

from __future__ import annotations

import json
import logging

from buildfeed_store.base import BaseStore, StoreError
from buildfeed_store.models import AuthorEntry, upsert

logger = logging.getLogger(__name__)

_GIST_FILENAME = "buildfeed_authors.json"


class GistStore(BaseStore):
    """Reads and writes the author directory as a JSON array in a Gist.

    The Gist ID is stored in .buildfeed.yml under `gist_id`. Running
    `buildfeed init` creates the Gist and writes the ID automatically.
    Writes are read-modify-write; concurrent edits from two machines can
    lose one of them.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore. Install it with: pip install PyGithub")
        self._gist_id = gist_id
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def _write(self, gist, entries: list[AuthorEntry]) -> None:
        content = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        gist.edit(files={_GIST_FILENAME: {"content": content}})

    def save(self, entry: AuthorEntry) -> None:
        try:
            gist = self._get_gist()
            self._write(gist, upsert(self._read_entries(gist), entry))
        except Exception as e:
            logger.warning("GistStore.save() failed (%s): %s", type(e).__name__, e)
            raise StoreError(f"Could not save author mapping to Gist ({type(e).__name__}: {e})") from e

    def remove(self, member_name: str) -> bool:
        try:
            gist = self._get_gist()
            entries = self._read_entries(gist)
            kept = [e for e in entries if e.member_name != member_name]
            if len(kept) == len(entries):
                return False
            self._write(gist, kept)
            return True
        except Exception as e:
            logger.warning("GistStore.remove() failed (%s): %s", type(e).__name__, e)
            raise StoreError(f"Could not update author directory in Gist ({type(e).__name__}: {e})") from e

    def list_authors(self) -> list[AuthorEntry]:
        try:
            return self._read_entries(self._get_gist())
        except Exception as e:
            logger.warning("GistStore.list_authors() failed: %s", e)
            return []

    def _read_entries(self, gist) -> list[AuthorEntry]:
        """Read the current JSON array from the Gist file, or return []."""
        file_obj = gist.files.get(_GIST_FILENAME)
        if file_obj is None:
            return []
        try:
            records = json.loads(file_obj.content) or []
        except (json.JSONDecodeError, AttributeError, TypeError):
            return []
        return [AuthorEntry.from_dict(r) for r in records if isinstance(r, dict)]

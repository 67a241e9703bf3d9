"""ConfigStore: the default store, kept inside .buildfeed.yml.

The directory lives under the ``authors`` key next to the rest of the job
configuration, so a team can review handle changes in the same pull request
as template changes::

    authors:
      - member_name: Jane Doe
        handle: janedoe_dev
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from buildfeed_store.base import BaseStore, StoreError
from buildfeed_store.models import AuthorEntry, upsert

logger = logging.getLogger(__name__)

_AUTHORS_KEY = "authors"


class ConfigStore(BaseStore):
    def __init__(self, config_path: str = ".buildfeed.yml"):
        self._path = Path(config_path)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        return yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}

    def _write_entries(self, entries: list[AuthorEntry]) -> None:
        # Keep every other key in the file untouched.
        try:
            data = self._read()
            if not isinstance(data, dict):
                raise StoreError(f"{self._path} must contain a mapping at the top level.")
            data[_AUTHORS_KEY] = [e.to_dict() for e in entries]
            self._path.write_text(
                yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Could not update {self._path}: {e}") from e

    def save(self, entry: AuthorEntry) -> None:
        self._write_entries(upsert(self.list_authors(), entry))

    def remove(self, member_name: str) -> bool:
        entries = self.list_authors()
        kept = [e for e in entries if e.member_name != member_name]
        if len(kept) == len(entries):
            return False
        self._write_entries(kept)
        return True

    def list_authors(self) -> list[AuthorEntry]:
        try:
            raw = self._read().get(_AUTHORS_KEY) or []
        except (OSError, yaml.YAMLError, AttributeError) as e:
            logger.warning("ConfigStore could not read %s: %s", self._path, e)
            return []
        if not isinstance(raw, list):
            logger.warning("Ignoring '%s' in %s: expected a list", _AUTHORS_KEY, self._path)
            return []
        return [AuthorEntry.from_dict(item) for item in raw if isinstance(item, dict)]

"""Abstract author store interface.

Any storage backend for the author directory (the .buildfeed.yml file,
SQLite, a GitHub Gist) implements this interface. The CLI depends on
BaseStore, not on a concrete backend, and snapshots list_authors() into an
AuthorDirectory before each notification.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildfeed_store.models import AuthorEntry


class StoreError(Exception):
    """Writing to or removing from the author directory failed."""


class BaseStore(ABC):
    """Pluggable persistence layer for the author directory.

    Implementations must be safe to call from CI environments where no
    interactive credentials are available: all auth happens via constructor
    arguments or environment variables resolved at init time.
    """

    @abstractmethod
    def save(self, entry: AuthorEntry) -> None:
        """Add an entry, or replace the handle of an existing member in place.

        Raises StoreError if the entry could not be written.
        """

    @abstractmethod
    def remove(self, member_name: str) -> bool:
        """Delete a member's entry. Returns False if it was not present.

        Raises StoreError if the directory could not be updated.
        """

    @abstractmethod
    def list_authors(self) -> list[AuthorEntry]:
        """Return all entries in insertion order.

        Returns an empty list if the directory is empty or unreadable; never raises.
        """

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Default is a no-op so callers can always call close() safely.
        """

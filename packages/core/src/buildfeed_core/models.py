"""Build and author data models consumed by the notification pipeline.

These are read-only views: the CI host (or the CLI acting for it) builds them
once per notification and nothing in buildfeed_core mutates them afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from buildfeed_core.outcome import Verdict


@dataclass(frozen=True)
class ChangeEntry:
    """A single source change included in a build."""

    author: str  # display name as the build system reports it


@dataclass(frozen=True)
class BuildRecord:
    """Snapshot of a finished build.

    ``previous`` links to the chronologically preceding build, or None for
    the first build of a job. Only its verdict is ever read.
    """

    verdict: Verdict
    timestamp: datetime
    url: str
    changes: tuple[ChangeEntry, ...] = field(default_factory=tuple)
    previous: BuildRecord | None = None


class AuthorDirectory:
    """Immutable snapshot mapping build-system display names to public handles.

    Built fresh for every notification from whatever store holds the mapping,
    so a directory update between builds never races with a running
    notification.
    """

    __slots__ = ("_handles",)

    def __init__(self, handles: dict[str, str] | None = None):
        self._handles = MappingProxyType(dict(handles or {}))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> AuthorDirectory:
        """Build a directory from ordered ``(display_name, handle)`` pairs.

        Pairs with an empty name or handle are skipped; when a name appears
        more than once the later handle wins.
        """
        handles: dict[str, str] = {}
        for name, handle in pairs:
            if name and handle:
                handles[name] = handle
        return cls(handles)

    def lookup(self, name: str) -> str | None:
        return self._handles.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"AuthorDirectory({dict(self._handles)!r})"

"""Author directory data models.

Decoupled from buildfeed_core so the store layer can be used independently;
the CLI turns a list of AuthorEntry into a core AuthorDirectory snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AuthorEntry:
    """Maps one build-system display name to a public handle."""

    member_name: str
    handle: str  # without the leading "@"

    def to_dict(self) -> dict:
        return {"member_name": self.member_name, "handle": self.handle}

    @classmethod
    def from_dict(cls, d: dict) -> AuthorEntry:
        return cls(member_name=str(d.get("member_name") or ""), handle=str(d.get("handle") or ""))


def upsert(entries: list[AuthorEntry], entry: AuthorEntry) -> list[AuthorEntry]:
    """Return *entries* with *entry* replacing any same-named entry in place, or appended."""
    result = []
    replaced = False
    for existing in entries:
        if existing.member_name == entry.member_name:
            if not replaced:
                result.append(entry)
                replaced = True
            continue
        result.append(existing)
    if not replaced:
        result.append(entry)
    return result

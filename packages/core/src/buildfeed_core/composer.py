"""Notification message composition.

compose() → select_template() + resolve_authors() → render()

Templates are printf-style strings with exactly three positional
placeholders, consumed in order: the authors block, the build timestamp and
the build link. For example::

    "%sbroke the build at %s %s"

The authors block already ends with a separator, so templates put the next
word directly after the first ``%s``. The timestamp is passed through as a
``datetime``. printf-style formatting has no date directives, so the only
useful placeholders for it are ``%s`` (``str()``, e.g. ``2012-05-07 13:24:00``)
and ``%r`` (``repr()``); a template cannot choose its own date format.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from buildfeed_core.errors import ConfigurationError
from buildfeed_core.models import AuthorDirectory, ChangeEntry
from buildfeed_core.outcome import BuildOutcome

AUTHOR_SEPARATOR = " "

# "no idea who"
NO_AUTHOR = "不知道是谁"


def select_template(outcome: BuildOutcome, templates: Mapping[BuildOutcome, str | None]) -> str:
    """Return the template configured for *outcome*; there is no fallback."""
    template = templates.get(outcome)
    if template is None:
        raise ConfigurationError(f"No template configured for outcome {outcome.value!r}.")
    return template


def resolve_authors(changes: Iterable[ChangeEntry], directory: AuthorDirectory) -> str:
    """Turn the change set into a ``"@a @b "`` block of public handles.

    Handles keep change-set order, including repeats. Authors missing from
    the directory are dropped; if none are left the block is NO_AUTHOR.
    """
    handles = []
    for entry in changes:
        handle = directory.lookup(entry.author)
        if handle is not None:
            handles.append("@" + handle)

    if not handles:
        return NO_AUTHOR
    return AUTHOR_SEPARATOR.join(handles) + AUTHOR_SEPARATOR


def render(template: str, authors: str, timestamp: datetime, link: str) -> str:
    """Substitute the three positional values into *template*."""
    try:
        return template % (authors, timestamp, link)
    except (TypeError, ValueError, KeyError) as e:
        raise ConfigurationError(
            f"Malformed template {template!r}: expected three positional placeholders ({e})."
        ) from e


def compose(
    outcome: BuildOutcome,
    templates: Mapping[BuildOutcome, str | None],
    changes: Iterable[ChangeEntry],
    directory: AuthorDirectory,
    timestamp: datetime,
    link: str,
) -> str:
    """Render the notification text for a classified build.

    Whether the outcome should be announced at all is decided by the caller;
    this always returns a message or raises ConfigurationError.
    """
    template = select_template(outcome, templates)
    authors = resolve_authors(changes, directory)
    # No length limit here: transports that cap status length must handle it.
    return render(template, authors, timestamp, link)

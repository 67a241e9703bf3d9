"""Transport interface for delivering build notifications.

The notification pipeline only ever needs two calls from a transport:

    shorten(url)   → a short link to embed in the message
    post(message)  → publish the rendered message

Each is a single best-effort attempt. Implementations raise TransportError
on any failure and leave logging and recovery to the caller; a failed post
must never fail the build that triggered it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseTransport(ABC):
    @abstractmethod
    def shorten(self, url: str) -> str:
        """Return a shortened form of *url*. Raises TransportError on failure."""

    @abstractmethod
    def post(self, message: str) -> None:
        """Publish *message*. Raises TransportError on failure."""

    def close(self) -> None:
        """Release any resources held by the transport (HTTP sessions).

        Default is a no-op so callers can always call close() safely.
        """

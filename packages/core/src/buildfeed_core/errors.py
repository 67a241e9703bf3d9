"""Exception types raised by buildfeed_core.

An author missing from the directory is not an error: the composer renders
the "unknown author" placeholder instead.
"""

from __future__ import annotations


class BuildfeedError(Exception):
    """Base class for all buildfeed errors."""


class ConfigurationError(BuildfeedError):
    """A template is missing or malformed, or a required credential is unset."""


class TransportError(BuildfeedError):
    """Shortening the build link or posting the message failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation

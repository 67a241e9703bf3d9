"""Dry-run transport: prints the message instead of publishing it."""

from __future__ import annotations

from rich.console import Console

from buildfeed_core.transport.base import BaseTransport

console = Console()


class ShadowTransport(BaseTransport):
    def __init__(self):
        self.posted: list[str] = []

    def shorten(self, url: str) -> str:
        return url

    def post(self, message: str) -> None:
        self.posted.append(message)
        console.print("\n[bold]Shadow notification (not posted)[/bold]")
        console.print(f"  {message}", markup=False)

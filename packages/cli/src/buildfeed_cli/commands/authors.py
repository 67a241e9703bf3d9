"""authors command group: maintain the author directory."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from buildfeed_store.base import StoreError
from buildfeed_store.models import AuthorEntry

console = Console()


@click.group("authors")
def authors_cmd():
    """Map build-system display names to public handles."""


@authors_cmd.command("list")
@click.pass_context
def list_cmd(ctx):
    """Show the directory in the order it is stored."""
    entries = ctx.obj["store"].list_authors()
    if not entries:
        console.print("[yellow]No authors mapped yet. Add one with `buildfeed authors add`.[/yellow]")
        return

    table = Table(title="Author directory", show_header=True, header_style="bold cyan")
    table.add_column("Display name", style="bold")
    table.add_column("Handle")
    for e in entries:
        table.add_row(e.member_name, f"@{e.handle}")
    console.print(table)


@authors_cmd.command("add")
@click.argument("member_name")
@click.argument("handle")
@click.pass_context
def add_cmd(ctx, member_name: str, handle: str):
    """Map MEMBER_NAME to HANDLE, replacing any existing mapping."""
    member_name = member_name.strip()
    handle = handle.strip().lstrip("@")
    if not member_name or not handle:
        raise click.UsageError("Both a display name and a handle are required.")

    try:
        ctx.obj["store"].save(AuthorEntry(member_name=member_name, handle=handle))
    except StoreError as e:
        raise click.ClickException(str(e)) from e
    console.print(f"[green]{member_name} → @{handle}[/green]")


@authors_cmd.command("remove")
@click.argument("member_name")
@click.pass_context
def remove_cmd(ctx, member_name: str):
    """Delete the mapping for MEMBER_NAME."""
    try:
        removed = ctx.obj["store"].remove(member_name)
    except StoreError as e:
        raise click.ClickException(str(e)) from e
    if removed:
        console.print(f"[green]Removed {member_name}.[/green]")
    else:
        console.print(f"[yellow]{member_name} is not in the directory.[/yellow]")

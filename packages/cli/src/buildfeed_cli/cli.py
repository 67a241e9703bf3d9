"""CLI entry point for buildfeed.

Commands:
  notify   : classify a finished build and post the notification
  classify : print the outcome for a verdict pair, without notifying
  authors  : maintain the display name → handle directory
  init     : interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape

from buildfeed_cli.commands.authors import authors_cmd
from buildfeed_cli.commands.classify import classify_cmd
from buildfeed_cli.commands.init import init_cmd
from buildfeed_cli.commands.notify import notify_cmd
from buildfeed_core.errors import ConfigurationError

console = Console()


def _build_store(config: dict, config_path: str = ".buildfeed.yml"):
    """Instantiate the configured author store from .buildfeed.yml settings.

    Store selection hierarchy:
      store: gist   → GistStore   (requires gist_id and github_token)
      store: sqlite → SQLiteStore (uses store_path or .buildfeed.db)
      (default)     → ConfigStore (the ``authors`` list in .buildfeed.yml)
    """
    from buildfeed_store.config_file import ConfigStore

    store_type = config.get("store", "config")

    if store_type == "gist":
        from buildfeed_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print(
                "[yellow]GistStore requires gist_id and a GitHub token. "
                "Falling back to the authors list in the config file.[/yellow]"
            )
            return ConfigStore(config_path)
        return GistStore(gist_id=gist_id, token=token)

    if store_type == "sqlite":
        from buildfeed_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path", ".buildfeed.db"))

    return ConfigStore(config_path)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("buildfeed"),
    prog_name="buildfeed",
)
@click.option(
    "--config",
    "config_path",
    default=".buildfeed.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="BUILDFEED_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Post build outcomes to a social feed, tagging the authors of the changes."""
    from buildfeed_core.config import load_config
    from buildfeed_cli.auth import resolve_github_token

    _setup_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        # A broken config file must not fail the build step that notifies.
        if ctx.invoked_subcommand == "notify":
            console.print(f"[yellow]{escape(str(e))} Skipping notification.[/yellow]")
            ctx.exit(0)
        raise click.ClickException(str(e)) from e

    # Only the Gist store needs GitHub; resolve once so every command agrees.
    if config.get("store") == "gist":
        token = resolve_github_token()
        if token:
            config["github_token"] = token

    store = _build_store(config, config_path)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.call_on_close(store.close)


main.add_command(notify_cmd)
main.add_command(classify_cmd)
main.add_command(authors_cmd)
main.add_command(init_cmd)

"""init command: interactive setup wizard.

Writes .buildfeed.yml with the default templates and the chosen author
store, optionally creates a shared Gist for the directory, and can generate
a GitHub Actions workflow that notifies after every build.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

import click
import yaml
from rich.console import Console

from buildfeed_core.config import DEFAULT_NOTIFY, DEFAULT_TEMPLATES

console = Console()
logger = logging.getLogger(__name__)

_WORKFLOW_TEMPLATE = """\
name: Build

on:
  push:
    branches: [{branch}]

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4

      - name: Build
        id: build
        run: {build_command}

      - name: Notify team feed
        if: always()
        env:
          WEIBO_ACCESS_TOKEN: ${{{{ secrets.WEIBO_ACCESS_TOKEN }}}}
        run: |
          pip install "buildfeed=={version}"
          buildfeed notify \\
            --result ${{{{ steps.build.outcome == 'success' && 'success' || 'failure' }}}} \\
            --url ${{{{ github.server_url }}}}/${{{{ github.repository }}}}/actions/runs/${{{{ github.run_id }}}} \\
            --author "${{{{ github.event.head_commit.author.name }}}}"
"""


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up buildfeed for your team.

    Creates .buildfeed.yml, optionally creates a shared GitHub Gist for the
    author directory, and generates a GitHub Actions workflow.
    """
    config_path = Path(ctx.obj.get("config_path", ".buildfeed.yml") if ctx.obj else ".buildfeed.yml")
    console.print("\n[bold cyan]buildfeed init[/bold cyan] — setup wizard\n")

    console.print("Author directory store:")
    console.print("  [bold]config[/bold]  — `authors` list inside .buildfeed.yml (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite file on the build agent")
    console.print("  [bold]gist[/bold]    — shared GitHub Gist, one directory for every job")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["config", "sqlite", "gist"]),
        default="config",
    )

    config: dict = {"store": store_type}

    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".buildfeed.db")
        if db_path != ".buildfeed.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")

    elif store_type == "gist":
        gist_id = _create_authors_gist()
        if gist_id:
            console.print(f"[green]Created authors Gist: {gist_id}[/green]")
            config["gist_id"] = gist_id
        else:
            console.print("[yellow]Gist creation failed, add gist_id manually to .buildfeed.yml[/yellow]")

    notify_success = click.confirm("Also notify on successful builds?", default=DEFAULT_NOTIFY["success"])
    config["notify"] = {**DEFAULT_NOTIFY, "success": notify_success}
    config["templates"] = dict(DEFAULT_TEMPLATES)

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    if click.confirm("\nGenerate .github/workflows/buildfeed.yml for GitHub Actions?", default=False):
        branch = click.prompt("Branch to build", default="main")
        build_command = click.prompt("Build command", default="make test")
        _write_workflow(branch, build_command)
        console.print("[green]Created .github/workflows/buildfeed.yml[/green]")
        console.print(
            "\n[yellow]Remember to add [bold]WEIBO_ACCESS_TOKEN[/bold] to your "
            "GitHub repository secrets (Settings → Secrets → Actions).[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Map authors with: [bold]buildfeed authors add \"<display name>\" <handle>[/bold]")


def _create_authors_gist() -> str | None:
    """Create a private Gist holding an empty author directory and return its ID."""
    tmp_dir = tempfile.mkdtemp()
    # gh names Gist files after their path, so the file must have the final name.
    named_path = os.path.join(tmp_dir, "buildfeed_authors.json")
    try:
        with open(named_path, "w", encoding="utf-8") as f:
            f.write("[]")
        result = subprocess.run(
            ["gh", "gist", "create", "--public=false", "--desc", "buildfeed author directory", named_path],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    finally:
        if os.path.exists(named_path):
            os.unlink(named_path)
        os.rmdir(tmp_dir)

    if result.returncode == 0:
        gist_url = result.stdout.strip()
        return gist_url.rstrip("/").split("/")[-1]
    logger.warning("gh gist create failed: %s", result.stderr.strip())
    return None


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys (authors included)."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    existing.update(config)
    path.write_text(
        yaml.safe_dump(existing, default_flow_style=False, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )


def _get_version() -> str:
    """Read the current buildfeed version from the installed package metadata."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("buildfeed")
    except PackageNotFoundError:
        return "0.1.0"


def _write_workflow(branch: str, build_command: str) -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "buildfeed.yml").write_text(
        _WORKFLOW_TEMPLATE.format(branch=branch, build_command=build_command, version=_get_version())
    )

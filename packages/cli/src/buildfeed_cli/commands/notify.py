"""notify command: classify a finished build and post the notification."""

from __future__ import annotations

from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape

from buildfeed_core.config import NotificationSettings
from buildfeed_core.errors import ConfigurationError
from buildfeed_core.models import AuthorDirectory, BuildRecord, ChangeEntry
from buildfeed_core.notifier import NotificationSummary, run_notification
from buildfeed_core.outcome import Verdict
from buildfeed_core.transport.shadow import ShadowTransport
from buildfeed_core.transport.weibo import WeiboTransport

console = Console()

VERDICT_CHOICE = click.Choice([v.name for v in Verdict], case_sensitive=False)


def _snapshot_directory(store) -> AuthorDirectory:
    """Freeze the store's current entries into the directory used for this build.

    The CLI owns this mapping: buildfeed_core has no store knowledge and
    buildfeed_store has no core knowledge.
    """
    return AuthorDirectory.from_pairs((e.member_name, e.handle) for e in store.list_authors())


def _build_record(
    result: str,
    previous_result: str | None,
    url: str,
    timestamp: datetime | None,
    authors: tuple[str, ...],
) -> BuildRecord:
    previous = None
    if previous_result is not None:
        # Only the previous verdict is ever read.
        previous = BuildRecord(verdict=Verdict.parse(previous_result), timestamp=datetime.min, url="")
    return BuildRecord(
        verdict=Verdict.parse(result),
        timestamp=timestamp or datetime.now().replace(microsecond=0),
        url=url,
        changes=tuple(ChangeEntry(author=a) for a in authors),
        previous=previous,
    )


def _print_summary(summary: NotificationSummary) -> None:
    if summary.posted:
        console.print(f"[green]Posted {summary.outcome.value} notification.[/green]")
    elif summary.skipped_reason == "disabled":
        console.print(f"[dim]Notifications for {summary.outcome.value} builds are disabled.[/dim]")
    else:
        console.print(f"[yellow]No notification posted for {summary.outcome.value} build.[/yellow]")


@click.command("notify")
@click.option("--result", required=True, type=VERDICT_CHOICE, help="Verdict of the build that just finished.")
@click.option(
    "--previous-result",
    type=VERDICT_CHOICE,
    default=None,
    help="Verdict of the preceding build. Omit for a job's first build.",
)
@click.option("--url", required=True, envvar="BUILD_URL", help="Permanent link to the build.")
@click.option(
    "--timestamp",
    type=click.DateTime(),
    default=None,
    help="When the build ran. Defaults to now.",
)
@click.option(
    "--author",
    "authors",
    multiple=True,
    help="Display name of a change author, once per change, in change-set order.",
)
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: print the message without posting it.")
@click.pass_context
def notify_cmd(
    ctx,
    result: str,
    previous_result: str | None,
    url: str,
    timestamp: datetime | None,
    authors: tuple[str, ...],
    shadow: bool,
):
    """Notify the team feed about a finished build.

    Always exits 0 once arguments are valid: a notification problem is
    reported here and never fails the build step that runs this command.

    \b
    Required environment variables:
      WEIBO_ACCESS_TOKEN   Weibo OAuth2 access token (not needed with --shadow)
      BUILD_URL            Used when --url is not given (set by Jenkins)
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    build = _build_record(result, previous_result, url, timestamp, authors)
    try:
        settings = NotificationSettings.from_config(config)
    except ConfigurationError as e:
        console.print(f"[yellow]{escape(str(e))} Skipping notification.[/yellow]")
        return
    directory = _snapshot_directory(store)

    if shadow:
        transport = ShadowTransport()
    else:
        try:
            transport = WeiboTransport(config.get("weibo_access_token"), timeout=config.get("timeout", 10))
        except ConfigurationError as e:
            console.print(f"[yellow]{escape(str(e))} Skipping notification.[/yellow]")
            return

    try:
        summary = run_notification(build, settings, directory, transport)
    finally:
        transport.close()

    _print_summary(summary)

"""Build notification orchestration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from buildfeed_core.composer import compose
from buildfeed_core.config import NotificationSettings
from buildfeed_core.errors import ConfigurationError, TransportError
from buildfeed_core.models import AuthorDirectory, BuildRecord
from buildfeed_core.outcome import BuildOutcome, classify_build
from buildfeed_core.transport.base import BaseTransport

console = Console()
logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class NotificationSummary:
    """What happened to one build's notification; returned by run_notification."""

    outcome: BuildOutcome
    message: str | None = None
    link: str | None = None
    posted: bool = False
    skipped_reason: str | None = None  # "disabled" | "configuration"
    error: str | None = None
    notified_at: str = field(default_factory=_utc_now)


def _shorten_link(transport: BaseTransport, url: str) -> str:
    try:
        return transport.shorten(url)
    except TransportError as e:
        logger.warning("Could not shorten build link, using the full URL: %s", e)
        return url


def run_notification(
    build: BuildRecord,
    settings: NotificationSettings,
    directory: AuthorDirectory,
    transport: BaseTransport,
    clock: Callable[[], str] | None = None,
) -> NotificationSummary:
    """Classify, compose and send the notification for one finished build.

    Never raises for configuration or transport problems: they are logged and
    recorded on the returned summary so the build's own result is untouched.
    *clock* returns the ISO-8601 time stamped on the summary; defaults to UTC now.
    """
    outcome = classify_build(build)
    summary = NotificationSummary(outcome=outcome, notified_at=(clock or _utc_now)())

    if not settings.should_notify(outcome):
        logger.info("Notifications disabled for outcome %s; nothing sent.", outcome.value)
        summary.skipped_reason = "disabled"
        return summary

    summary.link = _shorten_link(transport, build.url)

    try:
        summary.message = compose(
            outcome,
            settings.templates,
            build.changes,
            directory,
            build.timestamp,
            summary.link,
        )
    except ConfigurationError as e:
        logger.error("Not sending notification: %s", e)
        console.print(f"[red]buildfeed: {escape(str(e))}[/red]")
        summary.skipped_reason = "configuration"
        summary.error = str(e)
        return summary

    logger.info("Notification for %s build: %s", outcome.value, summary.message)

    try:
        transport.post(summary.message)
        summary.posted = True
    except TransportError as e:
        logger.error("Error publishing build notification: %s", e)
        console.print(f"[red]Error publishing build notification: {escape(str(e))}[/red]")
        summary.error = str(e)

    logger.info("buildfeed: done")
    return summary

"""classify command: show which outcome a verdict pair maps to."""

from __future__ import annotations

import click

from buildfeed_cli.commands.notify import VERDICT_CHOICE
from buildfeed_core.outcome import Verdict, classify


@click.command("classify")
@click.option("--result", required=True, type=VERDICT_CHOICE, help="Verdict of the current build.")
@click.option("--previous-result", type=VERDICT_CHOICE, default=None, help="Verdict of the preceding build.")
def classify_cmd(result: str, previous_result: str | None):
    """Print the outcome (success, failure, continuous_failure, recovered)."""
    previous = Verdict.parse(previous_result) if previous_result is not None else None
    click.echo(classify(Verdict.parse(result), previous).value)

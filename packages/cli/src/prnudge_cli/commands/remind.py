"""remind command — post reminder comments on overdue pull requests."""

from __future__ import annotations

import logging
import os

import click
from rich.console import Console

from prnudge_core.driver import run_reminders
from prnudge_core.elapsed import TIME_MODEL_NAMES
from prnudge_core.gh.pull_request import get_repo

console = Console()
logger = logging.getLogger(__name__)


def _fail(message: str) -> click.ClickException:
    """Build the single failure report for a run.

    Under GitHub Actions the message is also emitted as an ``::error::``
    workflow command so it shows up as a failed-step annotation.
    """
    if os.environ.get("GITHUB_ACTIONS") == "true":
        click.echo(f"::error::{message}")
    return click.ClickException(message)


@click.command("remind")
@click.option(
    "--repo",
    required=True,
    envvar="GITHUB_REPOSITORY",
    help="GitHub repository in owner/name format. Defaults to $GITHUB_REPOSITORY.",
)
@click.option("--message", "reminder_message", default=None, help="Reminder text. Overrides config file.")
@click.option(
    "--turnaround-hours",
    "review_turnaround_hours",
    default=None,
    help="Hours after a review request before the first reminder. Overrides config file.",
)
@click.option(
    "--rolling-hours",
    "review_rolling_reminder_hours",
    default=None,
    help="Hours after the last reminder before another one. Overrides config file.",
)
@click.option(
    "--time-model",
    type=click.Choice(TIME_MODEL_NAMES),
    default=None,
    help="Count hours on the wall clock or as business days. Overrides config file.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print reminders without posting them to GitHub.",
)
@click.pass_context
def remind_cmd(
    ctx,
    repo: str,
    reminder_message: str | None,
    review_turnaround_hours: str | None,
    review_rolling_reminder_hours: str | None,
    time_model: str | None,
    shadow: bool,
):
    """Remind requested reviewers on open pull requests.

    A reminder is posted when no review has been submitted and the review
    was requested longer ago than the turnaround. Further reminders follow
    once the rolling window has passed since the previous one.

    \b
    Required settings (.prnudge.yml, INPUT_* variables or options):
      reminder_message
      review_turnaround_hours
      review_rolling_reminder_hours
    """
    from prnudge_core.config import build_reminder_config, load_config
    from prnudge_cli.auth import resolve_github_token

    config_path = (ctx.obj or {}).get("config_path", ".prnudge.yml")

    try:
        config = load_config(
            config_path,
            cli_overrides={
                "reminder_message": reminder_message,
                "review_turnaround_hours": review_turnaround_hours,
                "review_rolling_reminder_hours": review_rolling_reminder_hours,
                "time_model": time_model,
            },
        )
        settings = build_reminder_config(config)
    except Exception as e:
        raise _fail(str(e)) from e

    token = resolve_github_token()
    if not token:
        raise _fail("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    try:
        this_repo = get_repo(repo, token=token)
        summary = run_reminders(this_repo, settings, shadow=shadow)
    except Exception as e:
        logger.debug("Reminder run failed", exc_info=True)
        raise _fail(str(e)) from e

    verb = "would be posted" if shadow else "posted"
    console.print(
        f"[green]Checked {summary.checked} open pull request(s) in {repo}: "
        f"{len(summary.reminded)} reminder(s) {verb}.[/green]"
    )
    for number, reason in sorted(summary.skipped.items()):
        logger.info("Skipped #%d: %s", number, reason)

"""One reminder pass over a repository's open pull requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from prnudge_core.elapsed import get_time_model
from prnudge_core.evaluator import Remind, check_due, evaluate
from prnudge_core.gh.pull_request import (
    get_comments,
    get_pull_request_detail,
    get_pull_requests,
    get_review_timeline,
    get_reviews,
    post_issue_comment,
    to_summary,
)
from prnudge_core.models import ReminderConfig

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What happened to each PR in a run. The CLI prints this after the loop."""

    repo: str
    checked: int = 0
    reminded: list[int] = field(default_factory=list)
    skipped: dict[int, str] = field(default_factory=dict)


def run_reminders(
    repo_obj,
    config: ReminderConfig,
    now: datetime | None = None,
    shadow: bool = False,
) -> RunSummary:
    """Evaluate every open PR in order and post a reminder where one is due.

    PRs are handled one at a time. Any error stops the loop and propagates;
    reminders already posted earlier in the run are left in place.
    """
    now = now or datetime.now(timezone.utc)
    time_model = get_time_model(config.time_model)
    summary = RunSummary(repo=repo_obj.full_name)

    for pr in get_pull_requests(repo_obj):
        pr_summary = to_summary(pr)
        summary.checked += 1
        logger.debug("pr title: %s", pr_summary.title)
        logger.debug("pr number: %d", pr_summary.number)
        logger.debug("pr id: %d", pr_summary.id)

        timeline = get_review_timeline(pr)
        reviews = get_reviews(pr)
        comments = get_comments(pr)

        skip = check_due(timeline, reviews, config, now, time_model)
        if skip is not None:
            summary.skipped[pr_summary.number] = skip.reason
            continue

        # Requested reviewers are only resolved for PRs that are already overdue.
        detail = get_pull_request_detail(repo_obj, pr_summary.number)
        decision = evaluate(detail, timeline, reviews, comments, config, now, time_model)
        if not isinstance(decision, Remind):
            summary.skipped[pr_summary.number] = decision.reason
            continue

        if shadow:
            console.print(f"[bold]#{detail.number}[/bold] {escape(pr_summary.title)}")
            console.print(f"  [dim]{escape(decision.body)}[/dim]")
        else:
            post_issue_comment(repo_obj, detail.number, decision.body)
            logger.info("Reminder posted on #%d for %s", detail.number, decision.reviewers or "no reviewers")
        summary.reminded.append(detail.number)

    return summary

"""Reminder eligibility rules.

Pure functions only: every input is already fetched, nothing here talks to
GitHub. The driver runs ``check_due`` before fetching the PR detail (which
holds the requested reviewers) and ``evaluate`` once it has it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence, Union

from prnudge_core.elapsed import TimeModel, get_time_model
from prnudge_core.models import Comment, PullRequestSummary, ReminderConfig, Review, ReviewRequestEvent

logger = logging.getLogger(__name__)

SKIP_REVIEWED = "already reviewed"
SKIP_NO_REQUEST = "no review request"
SKIP_NOT_DUE = "not yet due"
SKIP_REMINDED_RECENTLY = "reminded recently"


@dataclass(frozen=True)
class Skip:
    reason: str


@dataclass(frozen=True)
class Remind:
    reviewers: str
    body: str


Decision = Union[Skip, Remind]


def format_reviewers(logins: Sequence[str]) -> str:
    return ", ".join(f"@{login}" for login in logins)


def build_comment_body(logins: Sequence[str], reminder_message: str) -> str:
    """Reviewer mentions on the first line, the reminder message below."""
    return f"{format_reviewers(logins)}\n{reminder_message}"


def find_prior_reminders(comments: Sequence[Comment], config: ReminderConfig) -> list[Comment]:
    """Return comments matching the reminder pattern, in the order GitHub delivered them."""
    return [c for c in comments if config.reminder_pattern.search(c.body)]


def check_due(
    timeline_events: Sequence[ReviewRequestEvent],
    reviews: Sequence[Review],
    config: ReminderConfig,
    now: datetime,
    time_model: TimeModel | None = None,
) -> Skip | None:
    """Apply the reviewer-independent checks. Returns a Skip, or None when a reminder may be due."""
    if reviews:
        return Skip(SKIP_REVIEWED)
    if not timeline_events:
        return Skip(SKIP_NO_REQUEST)

    model = time_model or get_time_model(config.time_model)
    requested_at = timeline_events[0].created_at
    if not model.has_elapsed(requested_at, config.review_turnaround_hours, now):
        logger.debug(
            "Review requested at %s; turnaround of %sh not reached",
            requested_at.isoformat(),
            config.review_turnaround_hours,
        )
        return Skip(SKIP_NOT_DUE)
    return None


def evaluate(
    pr: PullRequestSummary,
    timeline_events: Sequence[ReviewRequestEvent],
    reviews: Sequence[Review],
    comments: Sequence[Comment],
    config: ReminderConfig,
    now: datetime,
    time_model: TimeModel | None = None,
) -> Decision:
    """Decide whether ``pr`` should get a reminder comment at ``now``.

    Checks run in a fixed order and stop at the first skip:
      1. any qualifying review        → Skip
      2. no review-request event      → Skip
      3. turnaround not elapsed       → Skip
      4. no prior reminder comment    → Remind
      5. rolling window elapsed since the last reminder → Remind, else Skip
    """
    model = time_model or get_time_model(config.time_model)

    skip = check_due(timeline_events, reviews, config, now, model)
    if skip is not None:
        return skip

    reviewers = format_reviewers(pr.requested_reviewers)
    body = build_comment_body(pr.requested_reviewers, config.reminder_message)

    prior = find_prior_reminders(comments, config)
    if not prior:
        return Remind(reviewers=reviewers, body=body)

    last_reminder = prior[-1]
    logger.debug("PR #%d last reminded at %s", pr.number, last_reminder.created_at.isoformat())
    if model.has_elapsed(last_reminder.created_at, config.review_rolling_reminder_hours, now):
        return Remind(reviewers=reviewers, body=body)
    return Skip(SKIP_REMINDED_RECENTLY)

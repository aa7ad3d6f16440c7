"""Transient records read from GitHub for a single run.

Nothing here is persisted. The driver builds these from PyGithub objects so
the evaluator never touches the API and can be tested with plain values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

# Review states that count as "the PR has been reviewed". PENDING and
# DISMISSED reviews are filtered out by the collaborator.
QUALIFYING_REVIEW_STATES = ("APPROVED", "CHANGES_REQUESTED", "COMMENTED")


@dataclass(frozen=True)
class PullRequestSummary:
    number: int
    title: str
    id: int
    requested_reviewers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReviewRequestEvent:
    created_at: datetime


@dataclass(frozen=True)
class Review:
    created_at: datetime
    state: str


@dataclass(frozen=True)
class Comment:
    body: str
    created_at: datetime


@dataclass(frozen=True)
class ReminderConfig:
    """Validated settings for one run. Built by ``build_reminder_config``."""

    reminder_message: str
    review_turnaround_hours: float
    review_rolling_reminder_hours: float
    time_model: str = "wall_clock"
    # Compiled from reminder_message as-is: regex metacharacters stay live.
    reminder_pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "reminder_pattern", re.compile(self.reminder_message))

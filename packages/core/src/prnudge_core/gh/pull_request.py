from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone

from github import Auth, Github, GithubException

from prnudge_core.errors import DataIntegrityError, TransportError
from prnudge_core.models import (
    QUALIFYING_REVIEW_STATES,
    Comment,
    PullRequestSummary,
    Review,
    ReviewRequestEvent,
)

# GitHub's maximum page size. PyGithub's PaginatedList follows the Link
# header, so results beyond one page are still fetched.
PER_PAGE = 100

_REVIEW_REQUESTED = "review_requested"


@contextmanager
def _github_call(action: str):
    try:
        yield
    except GithubException as e:
        message = e.data.get("message") if isinstance(e.data, dict) else None
        raise TransportError(f"GitHub API call failed while {action}: {message or e}") from e


def _require_timestamp(value: datetime | None, what: str) -> datetime:
    if value is None:
        raise DataIntegrityError(f"{what} has no timestamp.")
    if value.tzinfo is None:
        # PyGithub < 2.0 returns naive datetimes that are in UTC.
        value = value.replace(tzinfo=timezone.utc)
    return value


def get_repo(repo_name: str, token: str):
    with _github_call(f"loading repository {repo_name}"):
        return Github(auth=Auth.Token(token), per_page=PER_PAGE).get_repo(repo_name)


def get_pull_requests(repo, state: str = "open") -> list:
    with _github_call("listing pull requests"):
        return list(repo.get_pulls(state=state))


def to_summary(pr) -> PullRequestSummary:
    return PullRequestSummary(
        number=pr.number,
        title=pr.title or "",
        id=pr.id,
        requested_reviewers=tuple(user.login for user in (pr.requested_reviewers or [])),
    )


def get_pull_request_detail(repo, pr_number: int) -> PullRequestSummary:
    """Fetch a single PR fresh so the requested-reviewer list is current."""
    with _github_call(f"fetching PR #{pr_number}"):
        return to_summary(repo.get_pull(pr_number))


def get_review_timeline(pr) -> list[ReviewRequestEvent]:
    """Return the PR's review-request events, oldest first."""
    with _github_call(f"reading the timeline of PR #{pr.number}"):
        events = [e for e in pr.as_issue().get_timeline() if e.event == _REVIEW_REQUESTED]
    return [
        ReviewRequestEvent(created_at=_require_timestamp(e.created_at, f"Review request on PR #{pr.number}"))
        for e in events
    ]


def get_reviews(pr) -> list[Review]:
    """Return submitted reviews that count as a response (pending and dismissed are excluded)."""
    with _github_call(f"listing reviews of PR #{pr.number}"):
        reviews = [r for r in pr.get_reviews() if r.state in QUALIFYING_REVIEW_STATES]
    return [
        Review(created_at=_require_timestamp(r.submitted_at, f"Review {r.id} on PR #{pr.number}"), state=r.state)
        for r in reviews
    ]


def get_comments(pr) -> list[Comment]:
    """Return the PR's conversation comments in the order GitHub delivers them (oldest first)."""
    with _github_call(f"listing comments of PR #{pr.number}"):
        comments = list(pr.get_issue_comments())
    return [
        Comment(body=c.body or "", created_at=_require_timestamp(c.created_at, f"Comment {c.id} on PR #{pr.number}"))
        for c in comments
    ]


def post_issue_comment(repo, issue_number: int, body: str) -> None:
    with _github_call(f"commenting on #{issue_number}"):
        repo.get_issue(issue_number).create_comment(body)

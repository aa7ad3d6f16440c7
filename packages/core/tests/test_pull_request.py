"""Tests for GitHub pull request helper functions."""

import types
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from github import GithubException

from prnudge_core.errors import DataIntegrityError, TransportError
from prnudge_core.gh.pull_request import (
    PER_PAGE,
    get_comments,
    get_pull_request_detail,
    get_pull_requests,
    get_repo,
    get_review_timeline,
    get_reviews,
    post_issue_comment,
    to_summary,
)

T1 = datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 1, 4, 9, 0, tzinfo=timezone.utc)


def _event(kind, created_at=T1):
    return types.SimpleNamespace(event=kind, created_at=created_at)


def _pr_with_timeline(events):
    pr = MagicMock()
    pr.number = 7
    pr.as_issue.return_value.get_timeline.return_value = events
    return pr


def _not_found():
    return GithubException(404, {"message": "Not Found"}, None)


class TestGetRepo:
    def test_authenticates_with_token_and_page_size(self, mocker):
        mock_github = mocker.patch("prnudge_core.gh.pull_request.Github")
        repo = get_repo("owner/repo", token="tok")
        assert mock_github.call_args.kwargs["per_page"] == PER_PAGE
        mock_github.return_value.get_repo.assert_called_once_with("owner/repo")
        assert repo is mock_github.return_value.get_repo.return_value

    def test_wraps_github_errors(self, mocker):
        mock_github = mocker.patch("prnudge_core.gh.pull_request.Github")
        mock_github.return_value.get_repo.side_effect = _not_found()
        with pytest.raises(TransportError, match="Not Found"):
            get_repo("owner/missing", token="tok")


class TestGetPullRequests:
    def test_lists_open_prs(self):
        repo = MagicMock()
        prs = [MagicMock(), MagicMock()]
        repo.get_pulls.return_value = iter(prs)
        assert get_pull_requests(repo) == prs
        repo.get_pulls.assert_called_once_with(state="open")

    def test_error_during_pagination_is_transport_error(self):
        def pages():
            yield MagicMock()
            raise GithubException(502, "Bad Gateway", None)

        repo = MagicMock()
        repo.get_pulls.return_value = pages()
        with pytest.raises(TransportError):
            get_pull_requests(repo)


class TestToSummary:
    def test_maps_fields_and_reviewers(self):
        pr = MagicMock()
        pr.number = 3
        pr.title = "Fix login"
        pr.id = 99
        pr.requested_reviewers = [types.SimpleNamespace(login="alice"), types.SimpleNamespace(login="bob")]
        summary = to_summary(pr)
        assert summary.number == 3
        assert summary.title == "Fix login"
        assert summary.id == 99
        assert summary.requested_reviewers == ("alice", "bob")

    def test_detail_fetches_pull_by_number(self):
        repo = MagicMock()
        repo.get_pull.return_value.requested_reviewers = []
        repo.get_pull.return_value.number = 5
        detail = get_pull_request_detail(repo, 5)
        repo.get_pull.assert_called_once_with(5)
        assert detail.requested_reviewers == ()


class TestGetReviewTimeline:
    def test_keeps_only_review_requests_in_order(self):
        pr = _pr_with_timeline([_event("labeled"), _event("review_requested", T1), _event("review_requested", T2)])
        events = get_review_timeline(pr)
        assert [e.created_at for e in events] == [T1, T2]

    def test_empty_when_no_requests(self):
        pr = _pr_with_timeline([_event("committed"), _event("labeled")])
        assert get_review_timeline(pr) == []

    def test_missing_timestamp_is_data_integrity_error(self):
        pr = _pr_with_timeline([_event("review_requested", None)])
        with pytest.raises(DataIntegrityError):
            get_review_timeline(pr)

    def test_naive_timestamp_treated_as_utc(self):
        pr = _pr_with_timeline([_event("review_requested", datetime(2024, 1, 3, 9, 0))])
        assert get_review_timeline(pr)[0].created_at == T1


class TestGetReviews:
    def test_filters_to_qualifying_states(self):
        pr = MagicMock()
        pr.number = 7
        pr.get_reviews.return_value = [
            types.SimpleNamespace(id=1, state="APPROVED", submitted_at=T1),
            types.SimpleNamespace(id=2, state="PENDING", submitted_at=None),
            types.SimpleNamespace(id=3, state="DISMISSED", submitted_at=T1),
            types.SimpleNamespace(id=4, state="COMMENTED", submitted_at=T2),
        ]
        reviews = get_reviews(pr)
        assert [r.state for r in reviews] == ["APPROVED", "COMMENTED"]
        assert reviews[1].created_at == T2


class TestGetComments:
    def test_preserves_order_and_handles_none_body(self):
        pr = MagicMock()
        pr.number = 7
        pr.get_issue_comments.return_value = [
            types.SimpleNamespace(id=1, body="first", created_at=T1),
            types.SimpleNamespace(id=2, body=None, created_at=T2),
        ]
        comments = get_comments(pr)
        assert [c.body for c in comments] == ["first", ""]
        assert [c.created_at for c in comments] == [T1, T2]

    def test_wraps_github_errors(self):
        pr = MagicMock()
        pr.number = 7
        pr.get_issue_comments.side_effect = GithubException(403, {"message": "rate limit exceeded"}, None)
        with pytest.raises(TransportError, match="rate limit"):
            get_comments(pr)


class TestPostIssueComment:
    def test_creates_comment_on_issue(self):
        repo = MagicMock()
        post_issue_comment(repo, 7, "@alice\nPlease review")
        repo.get_issue.assert_called_once_with(7)
        repo.get_issue.return_value.create_comment.assert_called_once_with("@alice\nPlease review")

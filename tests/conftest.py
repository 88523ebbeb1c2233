"""Shared test fixtures."""

import pytest

from review_tally.exceptions import NetworkFailure
from review_tally.snapshot import SnapshotStore

BASE_URL = "https://api.github.com/repos/acme/widgets"


# Factory helpers
def make_user(**overrides) -> dict:
    base = {"id": 12345, "login": "octocat", "type": "User"}
    base.update(overrides)
    return base


def make_pr_data(number: int = 1, **overrides) -> dict:
    base = {
        "number": number,
        "id": 900000 + number,
        "state": "closed",
        "title": f"PR {number}",
        "user": make_user(),
        "closed_at": f"2025-01-{number % 28 + 1:02d}T12:00:00Z",
        "html_url": f"https://github.com/acme/widgets/pull/{number}",
        "comments_url": f"{BASE_URL}/issues/{number}/comments",
    }
    base.update(overrides)
    return base


def make_review_data(login: str | None = "reviewer", state: str = "APPROVED", **overrides) -> dict:
    base = {
        "id": 111,
        "user": make_user(login=login) if login is not None else None,
        "state": state,
        "body": "",
        "submitted_at": "2025-01-11T10:00:00Z",
    }
    base.update(overrides)
    return base


def make_comment_data(login: str | None = "commenter", **overrides) -> dict:
    base = {
        "id": 222,
        "user": make_user(login=login) if login is not None else None,
        "body": "nit",
        "created_at": "2025-01-11T10:00:00Z",
    }
    base.update(overrides)
    return base


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient.

    `pages` maps page number to a list of PR dicts, or to an exception
    (or list of outcomes consumed one per call). Reviews and comments are
    keyed by PR number; unknown PRs have none.
    """

    def __init__(self, pages=None, reviews=None, comments=None):
        self.pages = pages or {}
        self.reviews = reviews or {}
        self.comments = comments or {}
        self.page_calls: list[int] = []
        self.review_calls: list[int] = []
        self.comment_calls: list[str] = []

    @property
    def request_count(self) -> int:
        return len(self.page_calls) + len(self.review_calls) + len(self.comment_calls)

    @staticmethod
    def _resolve(outcome):
        if isinstance(outcome, list) and outcome and isinstance(outcome[0], (list, Exception)):
            outcome = outcome.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get_closed_pulls(self, page: int) -> list[dict]:
        self.page_calls.append(page)
        return self._resolve(self.pages.get(page, []))

    async def get_pr_reviews(self, pr_number: int) -> list[dict]:
        self.review_calls.append(pr_number)
        return self._resolve(self.reviews.get(pr_number, []))

    async def get_pr_comments(self, comments_url: str) -> list[dict]:
        self.comment_calls.append(comments_url)
        number = int(comments_url.rstrip("/").split("/")[-2])
        return self._resolve(self.comments.get(number, []))


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / "prs.json")


@pytest.fixture
def network_failure():
    return NetworkFailure("connection reset", url=f"{BASE_URL}/pulls")

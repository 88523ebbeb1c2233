"""Tests for Pydantic models."""

import json
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from review_tally.models import PullRequest, ReviewerStatus, SnapshotAdapter


def make_pr(**statuses) -> PullRequest:
    return PullRequest(
        number=1,
        closed_at=datetime(2025, 1, 1, tzinfo=UTC),
        html_url="https://github.com/acme/widgets/pull/1",
        comments_url="https://api.github.com/repos/acme/widgets/issues/1/comments",
        statuses=statuses,
    )


class TestPullRequest:
    def test_statuses_default_empty(self):
        pr = PullRequest(
            number=1,
            closed_at="2025-01-01T00:00:00Z",
            html_url="u",
            comments_url="c",
        )
        assert pr.statuses == {}
        assert pr.closed_at.tzinfo is not None

    def test_missing_vs_none(self):
        pr = make_pr(alice=None)
        assert pr.missing_handles(["alice", "bob"]) == ["bob"]
        assert pr.is_enriched(["alice"]) is True
        assert pr.is_enriched(["alice", "bob"]) is False

    def test_with_statuses_is_a_shallow_merge(self):
        pr = make_pr(alice=ReviewerStatus.COMMENTED, bob=None)
        updated = pr.with_statuses({"bob": ReviewerStatus.APPROVED})

        assert updated.statuses == {"alice": ReviewerStatus.COMMENTED, "bob": ReviewerStatus.APPROVED}
        assert pr.statuses == {"alice": ReviewerStatus.COMMENTED, "bob": None}
        assert updated.number == pr.number
        assert updated.closed_at == pr.closed_at

    def test_status_values(self):
        assert make_pr(alice="APPR").statuses["alice"] is ReviewerStatus.APPROVED
        assert make_pr(alice="COMM").statuses["alice"] is ReviewerStatus.COMMENTED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            make_pr(alice="LGTM")


class TestSnapshotAdapter:
    def test_keys_are_stringified_numbers(self):
        payload = json.loads(SnapshotAdapter.dump_json({1: make_pr()}))
        assert list(payload) == ["1"]

    def test_string_keys_parse_to_ints(self):
        snapshot = SnapshotAdapter.validate_json(
            '{"7": {"number": 7, "closed_at": "2025-01-01T00:00:00Z", '
            '"html_url": "u", "comments_url": "c", "statuses": {"alice": null}}}'
        )
        assert list(snapshot) == [7]
        assert snapshot[7].statuses == {"alice": None}

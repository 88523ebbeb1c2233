"""Pydantic models for the pull request snapshot."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, TypeAdapter


class ReviewerStatus(str, Enum):
    """Outcome of a tracked handle's involvement in a PR.

    A handle that did neither is stored as None, which is different from
    the handle being absent from `PullRequest.statuses` (not computed yet).
    """

    APPROVED = "APPR"
    COMMENTED = "COMM"


class PullRequest(BaseModel):
    """Closed pull request as kept in the snapshot."""

    number: int
    closed_at: datetime
    html_url: str
    comments_url: str
    statuses: dict[str, ReviewerStatus | None] = Field(default_factory=dict)

    def missing_handles(self, handles: Iterable[str]) -> list[str]:
        """Handles whose status has not been computed yet."""
        return [handle for handle in handles if handle not in self.statuses]

    def is_enriched(self, handles: Iterable[str]) -> bool:
        return not self.missing_handles(handles)

    def with_statuses(self, statuses: Mapping[str, ReviewerStatus | None]) -> "PullRequest":
        """Return a copy with `statuses` merged over the existing ones."""
        return self.model_copy(update={"statuses": {**self.statuses, **statuses}})


# PR number -> PullRequest
Snapshot = dict[int, PullRequest]

SnapshotAdapter = TypeAdapter(Snapshot)

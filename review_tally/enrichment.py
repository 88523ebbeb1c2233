"""Per-reviewer status enrichment.

PRs still missing a status for some tracked handle are enriched in
batches. Within a batch every PR is fetched concurrently; batches run one
after another and the snapshot is saved after each, so a rerun resumes at
the first batch that did not complete.
"""

import logging
from collections.abc import Sequence

import trio

from .config import BATCH_SIZE
from .exceptions import BatchAborted, FetchError
from .extractors.comments import is_commented_by
from .extractors.reviews import is_approved_by
from .github_client import GitHubClient
from .models import PullRequest, ReviewerStatus, Snapshot
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)

Statuses = dict[str, ReviewerStatus | None]


def derive_status(handle: str, reviews: list[dict], comments: list[dict]) -> ReviewerStatus | None:
    """Approval wins over commenting; None when the handle did neither."""
    if is_approved_by(handle, reviews):
        return ReviewerStatus.APPROVED
    if is_commented_by(handle, comments):
        return ReviewerStatus.COMMENTED
    return None


def derive_statuses(handles: Sequence[str], reviews: list[dict], comments: list[dict]) -> Statuses:
    return {handle: derive_status(handle, reviews, comments) for handle in handles}


def select_pending(snapshot: Snapshot, handles: Sequence[str]) -> list[PullRequest]:
    """PRs missing at least one handle's status, oldest number first."""
    return [
        snapshot[number]
        for number in sorted(snapshot)
        if not snapshot[number].is_enriched(handles)
    ]


def chunk(items: list, size: int) -> list[list]:
    """Split into consecutive groups of `size`; the last may be shorter."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [items[i : i + size] for i in range(0, len(items), size)]


async def fetch_statuses(client: GitHubClient, pr: PullRequest, handles: Sequence[str]) -> Statuses:
    """Fetch reviews and comments for one PR concurrently and derive statuses."""
    results: dict[str, list[dict]] = {}

    async def fetch_reviews():
        results["reviews"] = await client.get_pr_reviews(pr.number)

    async def fetch_comments():
        results["comments"] = await client.get_pr_comments(pr.comments_url)

    async with trio.open_nursery() as nursery:
        nursery.start_soon(fetch_reviews)
        nursery.start_soon(fetch_comments)

    return derive_statuses(handles, results["reviews"], results["comments"])


async def enrich_batch(
    client: GitHubClient,
    batch: list[PullRequest],
    handles: Sequence[str],
) -> dict[int, Statuses]:
    """Enrich every PR of a batch concurrently.

    The first failure cancels the rest of the batch and propagates.
    """
    results: dict[int, Statuses] = {}

    async def enrich_one(pr: PullRequest):
        results[pr.number] = await fetch_statuses(client, pr, handles)
        logger.debug(f"PR #{pr.number} enriched: {results[pr.number]}")

    async with trio.open_nursery(strict_exception_groups=True) as nursery:
        for pr in batch:
            nursery.start_soon(enrich_one, pr)

    return results


def merge_statuses(snapshot: Snapshot, results: dict[int, Statuses]) -> Snapshot:
    """Shallow-merge computed statuses into their snapshot entries."""
    merged = dict(snapshot)
    for number, statuses in results.items():
        merged[number] = merged[number].with_statuses(statuses)
    return merged


def _leaf_errors(group: BaseExceptionGroup):
    for error in group.exceptions:
        if isinstance(error, BaseExceptionGroup):
            yield from _leaf_errors(error)
        else:
            yield error


async def enrich_snapshot(
    client: GitHubClient,
    snapshot: Snapshot,
    store: SnapshotStore,
    handles: Sequence[str],
    batch_size: int = BATCH_SIZE,
) -> Snapshot:
    """Enrich every pending PR and return the updated snapshot.

    Raises:
        BatchAborted: a fetch in some batch failed. Earlier batches are
            already saved; the failing one is not.
    """
    pending = select_pending(snapshot, handles)
    batches = chunk(pending, batch_size)
    logger.info(f"{len(pending)} of {len(snapshot)} PRs need enrichment ({len(batches)} batches)")

    for index, batch in enumerate(batches, start=1):
        logger.info(f"Iterating over PR chunk number {index} out of {len(batches)}")
        try:
            results = await enrich_batch(client, batch, handles)
        except ExceptionGroup as group:
            fetch_errors, others = group.split(FetchError)
            if others is not None:
                raise
            errors = list(_leaf_errors(fetch_errors))
            for error in errors:
                logger.error(f"Batch {index} failed: {type(error).__name__}: {error}")
            raise BatchAborted(index, errors) from group

        snapshot = merge_statuses(snapshot, results)
        store.save(snapshot)

    return snapshot

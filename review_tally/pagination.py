"""Closed pull request listing walker.

Pages are fetched one at a time. New PRs are merged into the snapshot and
the snapshot is saved after every page, so an interrupted run resumes with
everything collected so far. A failed page is retried at the same index.
"""

import logging

import trio
from pydantic import ValidationError

from .exceptions import FetchError
from .extractors.prs import extract_pr
from .github_client import GitHubClient
from .models import PullRequest, Snapshot
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)


def merge_new_prs(snapshot: Snapshot, prs_data: list[dict]) -> tuple[Snapshot, int]:
    """Merge a listing page into the snapshot.

    Entries already in the snapshot are left alone so enrichment results
    from earlier runs survive. Returns the new snapshot and how many PRs
    were added.
    """
    new_prs: dict[int, PullRequest] = {}
    for pr_data in prs_data:
        if pr_data["number"] in snapshot or pr_data["number"] in new_prs:
            continue
        pr = extract_pr(pr_data)
        new_prs[pr.number] = pr
    return {**new_prs, **snapshot}, len(new_prs)


async def collect_pages(
    client: GitHubClient,
    snapshot: Snapshot,
    store: SnapshotStore,
    max_page: int,
    retry_limit: int = 0,
    retry_delay: float = 0.0,
) -> Snapshot:
    """Walk listing pages 0..max_page-1 and return the grown snapshot.

    Args:
        client: Open GitHub client
        snapshot: Snapshot loaded at startup
        store: Where to persist after each page
        max_page: Page budget
        retry_limit: Consecutive failures of one page before pagination
            stops; 0 retries forever
        retry_delay: Base backoff in seconds, doubled on each failed attempt
    """
    page = 0
    attempts = 0

    while page < max_page:
        logger.info(f"Querying page {page}")
        prs_data = None
        try:
            prs_data = await client.get_closed_pulls(page)
            snapshot, added = merge_new_prs(snapshot, prs_data)
        except (FetchError, ValidationError, KeyError, TypeError, ValueError) as e:
            attempts += 1
            logger.error(f"Page {page} failed (attempt {attempts}): {type(e).__name__}: {e}")
            logger.error(f"Page {page} contents: {prs_data!r}")

            if retry_limit and attempts >= retry_limit:
                logger.error(f"Giving up on pagination at page {page} after {attempts} attempts")
                break

            if retry_delay:
                wait = retry_delay * 2 ** (attempts - 1)
                logger.warning(f"Retrying page {page} in {wait:.1f}s...")
                await trio.sleep(wait)
            continue

        attempts = 0
        store.save(snapshot)
        logger.info(f"Page {page}: {len(prs_data)} PRs, {added} new, {len(snapshot)} total")

        page += 1

    return snapshot

"""Main orchestrator: collect closed PRs, enrich them, print the summary.

Uses trio for concurrent API requests per batch of PRs.
"""

import logging
import sys
from pathlib import Path

import trio
from rich.console import Console

from .config import BATCH_SIZE, Settings, load_settings
from .enrichment import enrich_snapshot
from .exceptions import BatchAborted, ConfigurationMissing
from .github_client import GitHubClient
from .models import Snapshot
from .pagination import collect_pages
from .report import print_report
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path) -> None:
    """Log to a file under the data directory and to stderr."""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode="a"),
            logging.StreamHandler(sys.stderr),
        ],
    )


async def run(settings: Settings, client: GitHubClient, store: SnapshotStore, console: Console) -> Snapshot:
    """Run pagination then enrichment, threading the snapshot through both.

    Raises:
        BatchAborted: enrichment stopped on a failed batch
    """
    snapshot = store.load()
    if snapshot:
        console.print(f"[green]Loaded {len(snapshot)} PRs from {store.path}[/]")

    if settings.skip_all:
        return snapshot

    if settings.skip_pagination:
        logger.info("Skipping PR listing")
    else:
        snapshot = await collect_pages(
            client,
            snapshot,
            store,
            settings.max_page,
            retry_limit=settings.page_retry_limit,
            retry_delay=settings.page_retry_delay,
        )

    snapshot = await enrich_snapshot(client, snapshot, store, settings.handles, batch_size=BATCH_SIZE)
    logger.info(f"Run complete: {len(snapshot)} PRs, {client.request_count} API requests")
    return snapshot


async def main(settings: Settings) -> None:
    """Main entry point."""
    console = Console()
    store = SnapshotStore(settings.snapshot_file)

    logger.info("=" * 60)
    logger.info(
        f"Starting run for {settings.repo}: handles={','.join(settings.handles)}, "
        f"max_page={settings.max_page}, skip={settings.skip_all}, "
        f"skip_pagination={settings.skip_pagination}"
    )

    async with GitHubClient(settings.token, settings.repo) as client:
        snapshot = await run(settings, client, store, console)

    print_report(snapshot, settings.handles, console)


def cli():
    """CLI entry point."""
    try:
        settings = load_settings()
    except ConfigurationMissing as e:
        print(e)
        sys.exit(1)

    setup_logging(settings.log_file)

    try:
        trio.run(main, settings)
    except BatchAborted as e:
        logger.error(str(e))
        print(f"Error: {e}")
        print("Progress up to the previous batch is saved. Run again to resume.")
        sys.exit(2)


if __name__ == "__main__":
    cli()

"""Summary table of tracked reviewers' involvement in closed PRs."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC

from rich.console import Console
from rich.table import Table

from .models import Snapshot

BASE_COLUMNS = ("number", "closed_at", "html_url")


def format_status(value) -> str:
    """Render a status cell; None prints as an empty cell."""
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def build_rows(snapshot: Snapshot, handles: Sequence[str]) -> list[dict]:
    """Project PRs to report rows, dropping PRs no tracked handle touched.

    Rows are sorted by closure time, oldest first.
    """
    prs = sorted(snapshot.values(), key=lambda pr: (pr.closed_at, pr.number))
    rows = []
    for pr in prs:
        row = {
            "number": pr.number,
            "closed_at": pr.closed_at.astimezone(UTC).date().isoformat(),
            "html_url": pr.html_url,
        }
        for handle in handles:
            row[handle] = pr.statuses.get(handle)
        if any(row[handle] is not None for handle in handles):
            rows.append(row)
    return rows


def totals_row(rows: list[dict], handles: Sequence[str]) -> dict:
    """Per-handle count of rows with a status."""
    totals: dict = {column: None for column in BASE_COLUMNS}
    for handle in handles:
        totals[handle] = sum(1 for row in rows if row[handle] is not None)
    return totals


def summarize(snapshot: Snapshot, handles: Sequence[str]) -> list[dict]:
    """Report rows followed by the totals row."""
    rows = build_rows(snapshot, handles)
    return [*rows, totals_row(rows, handles)]


def build_table(snapshot: Snapshot, handles: Sequence[str]) -> Table:
    *rows, totals = summarize(snapshot, handles)

    table = Table(title="Closed PR reviews")
    table.add_column("PR", justify="right", style="cyan")
    table.add_column("Closed")
    table.add_column("URL", overflow="fold")
    for handle in handles:
        table.add_column(handle, justify="center", style="green")

    for row in rows:
        table.add_row(
            str(row["number"]),
            row["closed_at"],
            row["html_url"],
            *(format_status(row[handle]) for handle in handles),
        )

    table.add_section()
    table.add_row("", "", "", *(str(totals[handle]) for handle in handles), style="bold")
    return table


def print_report(snapshot: Snapshot, handles: Sequence[str], console: Console | None = None) -> None:
    """Print the summary table to stdout."""
    console = console or Console()
    console.print(build_table(snapshot, handles))

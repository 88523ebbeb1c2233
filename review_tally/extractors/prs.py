"""Pull request listing extractor."""

from datetime import datetime

from ..models import PullRequest


def parse_datetime(dt_str: str | None) -> datetime | None:
    """Parse ISO datetime string, returns None if input is empty."""
    if not dt_str:
        return None
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def extract_pr(pr_data: dict) -> PullRequest:
    """Project a closed PR listing entry to the fields the snapshot keeps."""
    closed_at = parse_datetime(pr_data.get("closed_at"))
    if closed_at is None:
        raise ValueError(f"PR #{pr_data.get('number')} has no closed_at")

    return PullRequest(
        number=pr_data["number"],
        closed_at=closed_at,
        html_url=pr_data["html_url"],
        comments_url=pr_data["comments_url"],
    )

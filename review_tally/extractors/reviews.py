"""PR review verdict extractor."""

APPROVED_STATE = "APPROVED"


def review_author(review_data: dict) -> str | None:
    """Login of the review author; deleted users come back as a null user."""
    user = review_data.get("user")
    if not user:
        return None
    return user.get("login")


def is_approved_by(handle: str, reviews: list[dict]) -> bool:
    """True if `handle` submitted an approving review."""
    return any(
        review_author(review) == handle and review.get("state") == APPROVED_STATE
        for review in reviews
    )

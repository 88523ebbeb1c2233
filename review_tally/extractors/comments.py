"""PR discussion comment extractor."""


def comment_author(comment_data: dict) -> str | None:
    user = comment_data.get("user")
    if not user:
        return None
    return user.get("login")


def is_commented_by(handle: str, comments: list[dict]) -> bool:
    """True if `handle` wrote at least one discussion comment."""
    return any(comment_author(comment) == handle for comment in comments)

"""Error taxonomy for review-tally."""


class ReviewTallyError(Exception):
    """Base class for all review-tally errors."""


class ConfigurationMissing(ReviewTallyError):
    """A required environment variable is absent or malformed."""


class FetchError(ReviewTallyError):
    """A single API call did not yield usable data."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RateLimitExceeded(FetchError):
    """GitHub rejected the call because the rate limit is exhausted."""


class MalformedResponse(FetchError):
    """The response body could not be used as structured data."""


class NetworkFailure(FetchError):
    """Transport failure or unsuccessful HTTP status."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message, url)
        self.status_code = status_code


class BatchAborted(ReviewTallyError):
    """An enrichment batch failed; nothing from it was persisted."""

    def __init__(self, batch_number: int, errors: list[Exception]):
        self.batch_number = batch_number
        self.errors = errors
        details = "; ".join(f"{type(e).__name__}: {e}" for e in errors)
        super().__init__(f"Enrichment batch {batch_number} aborted: {details}")

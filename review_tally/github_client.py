"""GitHub API client for the closed pull request listing.

Uses httpx.AsyncClient with trio. Each call is a single GET; callers own retries.
"""

import json
import logging
import re
from typing import Any

import httpx

from .config import API_ROOT, PER_PAGE
from .exceptions import MalformedResponse, NetworkFailure, RateLimitExceeded

logger = logging.getLogger(__name__)

RATE_LIMIT_PATTERN = re.compile(r"API rate limit exceeded|secondary rate limit", re.IGNORECASE)


class GitHubClient:
    """Async GitHub REST client scoped to one repository."""

    def __init__(self, token: str, repo: str, timeout: float = 30.0):
        """Initialize the client.

        Args:
            token: Personal access token, sent as a bearer token
            repo: Repository as "owner/name"
            timeout: Per-request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token required")
        self.token = token
        self.repo = repo
        self.base_url = f"{API_ROOT}/repos/{repo}"
        self.timeout = timeout
        self.client: httpx.AsyncClient | None = None
        self._request_count = 0

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": "review-tally",
            },
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, *args):
        if self.client:
            await self.client.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    def pulls_url(self, page: int) -> str:
        return f"{self.base_url}/pulls?state=closed&per_page={PER_PAGE}&page={page}"

    def reviews_url(self, pr_number: int) -> str:
        return f"{self.base_url}/pulls/{pr_number}/reviews?per_page={PER_PAGE}"

    async def fetch(self, url: str) -> Any:
        """GET `url` and return the decoded JSON body.

        Raises:
            NetworkFailure: transport error or unsuccessful status
            MalformedResponse: body is not JSON
            RateLimitExceeded: GitHub reports the rate limit as exhausted
        """
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        logger.debug(f"GET {url}")
        try:
            response = await self.client.get(url)
        except httpx.TransportError as e:
            raise NetworkFailure(f"{type(e).__name__}: {e} ({url})", url) from e
        finally:
            self._request_count += 1

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponse(
                f"Invalid JSON from {url} (status {response.status_code}): {e}", url
            ) from e

        message = body.get("message") if isinstance(body, dict) else None
        if isinstance(message, str) and RATE_LIMIT_PATTERN.search(message):
            raise RateLimitExceeded(f"API rate limit exceeded ({url})", url)

        if response.status_code >= 400:
            raise NetworkFailure(
                f"HTTP {response.status_code} from {url}: {message or response.reason_phrase}",
                url,
                status_code=response.status_code,
            )

        return body

    async def fetch_list(self, url: str) -> list[dict]:
        """GET a listing endpoint; the body must be a JSON array of objects."""
        body = await self.fetch(url)
        if not isinstance(body, list):
            raise MalformedResponse(f"Expected a list from {url}, got {type(body).__name__}", url)
        for item in body:
            if not isinstance(item, dict):
                raise MalformedResponse(f"Expected objects in the list from {url}, got {type(item).__name__}", url)
        return body

    async def get_closed_pulls(self, page: int) -> list[dict]:
        """One page of closed pull requests."""
        return await self.fetch_list(self.pulls_url(page))

    async def get_pr_reviews(self, pr_number: int) -> list[dict]:
        """Reviews submitted on a PR."""
        return await self.fetch_list(self.reviews_url(pr_number))

    async def get_pr_comments(self, comments_url: str) -> list[dict]:
        """Discussion comments, from the listing's comments_url."""
        return await self.fetch_list(comments_url)

"""Configuration for pull request review tallying."""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .exceptions import ConfigurationMissing

load_dotenv()

API_ROOT = "https://api.github.com"

# Extraction settings
PER_PAGE = 100  # Max items per API page
BATCH_SIZE = 20  # PRs enriched concurrently per batch
SNAPSHOT_FILENAME = "prs.json"
LOG_FILENAME = "review_tally.log"

DEFAULT_DATA_DIR = "data"
DEFAULT_PAGE_RETRY_LIMIT = 5  # Consecutive failures of one page before giving up (0 = unbounded)
DEFAULT_PAGE_RETRY_DELAY = 1.0  # Base delay in seconds, doubled per attempt

_FALSE_VALUES = {"", "0", "false", "no", "off"}


class Settings(BaseModel):
    """Immutable run configuration."""

    model_config = ConfigDict(frozen=True)

    token: str
    repo: str
    handles: tuple[str, ...]
    max_page: int
    skip_all: bool = False
    skip_pagination: bool = False
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    page_retry_limit: int = DEFAULT_PAGE_RETRY_LIMIT
    page_retry_delay: float = DEFAULT_PAGE_RETRY_DELAY

    @property
    def snapshot_file(self) -> Path:
        return self.data_dir / SNAPSHOT_FILENAME

    @property
    def log_file(self) -> Path:
        return self.data_dir / LOG_FILENAME


def parse_flag(value: str | None) -> bool:
    """Interpret an environment switch. Unset and falsy spellings are False."""
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


def parse_handles(value: str) -> tuple[str, ...]:
    """Split a comma-separated handle list, keeping the given order."""
    handles = []
    for handle in value.split(","):
        handle = handle.strip()
        if handle and handle not in handles:
            handles.append(handle)
    return tuple(handles)


def _require(environ: Mapping[str, str], name: str, hint: str = "") -> str:
    value = environ.get(name)
    if not value:
        message = f"The environment variable {name} does not exist."
        if hint:
            message = f"{message} {hint}"
        raise ConfigurationMissing(message)
    return value


def _parse_number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationMissing(f"The environment variable {name} must be a number, got {raw!r}.") from None
    if value < 0:
        raise ConfigurationMissing(f"The environment variable {name} must not be negative, got {raw!r}.")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Raises:
        ConfigurationMissing: a required variable is unset or a number is malformed.
    """
    if environ is None:
        environ = os.environ

    repo = _require(environ, "USER_REPO", 'Usage: USER_REPO="owner/name"')
    _require(environ, "MAX_PAGE")
    max_page = _parse_number(environ, "MAX_PAGE", 0, int)
    token = _require(environ, "GITHUB_ACCESS_TOKEN")
    handles = parse_handles(_require(environ, "GITHUB_HANDLES", 'Usage: GITHUB_HANDLES="user1,user2"'))
    if not handles:
        raise ConfigurationMissing('The environment variable GITHUB_HANDLES lists no handles. Usage: GITHUB_HANDLES="user1,user2"')

    return Settings(
        token=token,
        repo=repo.strip().strip("/"),
        handles=handles,
        max_page=max_page,
        skip_all=parse_flag(environ.get("SKIP")),
        skip_pagination=parse_flag(environ.get("SKIP_PRS_FETCHING")),
        data_dir=Path(environ.get("DATA_DIR") or DEFAULT_DATA_DIR),
        page_retry_limit=_parse_number(environ, "PAGE_RETRY_LIMIT", DEFAULT_PAGE_RETRY_LIMIT, int),
        page_retry_delay=_parse_number(environ, "PAGE_RETRY_DELAY", DEFAULT_PAGE_RETRY_DELAY, float),
    )

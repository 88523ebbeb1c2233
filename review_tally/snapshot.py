"""Snapshot persistence: one JSON file holding every PR seen so far."""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .models import Snapshot, SnapshotAdapter

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Loads and saves the snapshot file.

    The file is always rewritten in full. Writes go to a temp file that is
    renamed over the target, so a crash mid-write leaves the old snapshot.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Snapshot:
        """Read the snapshot; missing or unreadable files yield an empty one."""
        if not self.path.exists():
            return {}

        try:
            snapshot = SnapshotAdapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable snapshot {self.path}: {e}")
            return {}

        logger.info(f"Loaded {len(snapshot)} PRs from {self.path}")
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Overwrite the snapshot file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        ordered = {number: snapshot[number] for number in sorted(snapshot)}
        payload = SnapshotAdapter.dump_json(ordered, indent=2)

        # Write to temp file first, then atomic rename
        temp_file = self.path.with_name(f"{self.path.name}.tmp")
        temp_file.write_bytes(payload)
        os.replace(temp_file, self.path)  # Atomic on POSIX
        logger.debug(f"Saved {len(snapshot)} PRs to {self.path}")

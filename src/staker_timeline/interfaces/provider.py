"""ArchiveProvider protocol - hands out the decoded event store."""

from __future__ import annotations

from typing import Protocol

from staker_timeline.archive.store import EventStore


class ArchiveProvider(Protocol):
    """Supplies a ready EventStore, loading it if needed."""

    async def get(self) -> EventStore:
        """Return the decoded store. Raises ArchiveError on failure."""
        ...

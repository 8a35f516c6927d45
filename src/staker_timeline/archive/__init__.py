"""Event archive: loading, decoding and session caching."""

from staker_timeline.archive.errors import (
    ArchiveDecodeError,
    ArchiveError,
    ArchiveFetchError,
    ArchiveTooLargeError,
)
from staker_timeline.archive.store import EventStore

__all__ = [
    "ArchiveError", "ArchiveFetchError", "ArchiveTooLargeError", "ArchiveDecodeError",
    "EventStore",
]

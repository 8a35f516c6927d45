"""Process-wide archive cache with an explicit load lifecycle."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from staker_timeline.archive.errors import ArchiveError
from staker_timeline.archive.loader import MAX_DECOMPRESSED_BYTES, decode_archive
from staker_timeline.archive.store import EventStore
from staker_timeline.interfaces.source import ArchiveSource

log = logging.getLogger(__name__)


class CacheState(str, Enum):
    """Lifecycle of the cached archive."""

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ArchiveCache:
    """Fetches and decodes the archive once, then serves it for the session.

    Concurrent ``get()`` calls share a single load. There is no
    invalidation: a READY cache keeps its store until the process exits.
    A failed load leaves the cache in ERROR; the next ``get()`` starts a new
    attempt.
    """

    def __init__(
        self,
        source: ArchiveSource,
        max_decompressed_bytes: int = MAX_DECOMPRESSED_BYTES,
    ) -> None:
        self._source = source
        self._max_decompressed = max_decompressed_bytes
        self._lock = asyncio.Lock()
        self._state = CacheState.EMPTY
        self._store: EventStore | None = None
        self._error: str | None = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def store(self) -> EventStore | None:
        """The decoded store once READY, else None."""
        return self._store

    async def get(self) -> EventStore:
        """Return the cached store, loading it on first use.

        Raises ArchiveError if the load fails.
        """
        if self._store is not None:
            return self._store

        async with self._lock:
            if self._store is not None:
                return self._store

            self._state = CacheState.LOADING
            self._error = None
            try:
                raw = await self._source.fetch()
                store = decode_archive(raw, self._max_decompressed)
            except ArchiveError as exc:
                self._state = CacheState.ERROR
                self._error = str(exc)
                log.error("Event archive load failed: %s", exc)
                raise

            self._store = store
            self._state = CacheState.READY
            return store

"""ArchiveSource protocol - delivers the raw compressed archive bytes."""

from __future__ import annotations

from typing import Protocol


class ArchiveSource(Protocol):
    """Fetches the gzip-compressed event archive."""

    @property
    def location(self) -> str:
        """URL or path the archive is read from, for logs and errors."""
        ...

    async def fetch(self) -> bytes:
        """Return the compressed archive bytes.

        Raises ArchiveFetchError on transport failure and
        ArchiveTooLargeError when the compressed ceiling is exceeded.
        """
        ...

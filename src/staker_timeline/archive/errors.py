"""Archive failure taxonomy."""

from __future__ import annotations


class ArchiveError(Exception):
    """Base class: the archive could not be made available for lookups."""


class ArchiveFetchError(ArchiveError):
    """Transport failure: non-OK response, connection error or missing file."""


class ArchiveTooLargeError(ArchiveError):
    """The archive exceeded a compressed or decompressed byte ceiling."""


class ArchiveDecodeError(ArchiveError):
    """The archive is not valid gzip-compressed JSON of the expected shape."""

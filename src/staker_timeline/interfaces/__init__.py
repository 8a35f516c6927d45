"""Protocol interfaces for staker_timeline components."""

from staker_timeline.interfaces.source import ArchiveSource
from staker_timeline.interfaces.provider import ArchiveProvider

__all__ = ["ArchiveSource", "ArchiveProvider"]

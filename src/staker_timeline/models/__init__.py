"""Data models for staker_timeline."""

from staker_timeline.models.events import (
    EventType,
    StakerEvent,
    VestingParams,
    describe_event_type,
    parse_event,
)
from staker_timeline.models.records import (
    AddressRecord,
    ArchiveMeta,
    Operation,
    TimelinePoint,
    VestingSchedule,
    WalletSummary,
)
from staker_timeline.models.snapshots import WalletTimeline
from staker_timeline.models.config import TimelineConfig

__all__ = [
    "EventType", "StakerEvent", "VestingParams", "describe_event_type", "parse_event",
    "AddressRecord", "ArchiveMeta", "Operation", "TimelinePoint",
    "VestingSchedule", "WalletSummary",
    "WalletTimeline",
    "TimelineConfig",
]

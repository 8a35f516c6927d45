"""Balance reconstruction engine."""

from staker_timeline.engine.accumulator import VestingScheduleSet, build_balance_timeline
from staker_timeline.engine.extender import coverage_end_timestamp, extend_timeline
from staker_timeline.engine.lookup import build_wallet_timeline
from staker_timeline.engine.summary import derive_summary
from staker_timeline.engine.vesting import locked_remaining, total_locked, unlock_boundaries

__all__ = [
    "VestingScheduleSet", "build_balance_timeline",
    "coverage_end_timestamp", "extend_timeline",
    "build_wallet_timeline",
    "derive_summary",
    "locked_remaining", "total_locked", "unlock_boundaries",
]

"""Vesting model - remaining locked amount of cliff + linear unlock schedules."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, Iterator

from staker_timeline.models.records import VestingSchedule

_SECONDS_PER_HOUR = 3600.0


def _unlocks(schedule: VestingSchedule) -> bool:
    return schedule.unlock_period_hours > 0 and schedule.unlock_rate_amount > 0


def locked_remaining(schedule: VestingSchedule, instant: datetime) -> float:
    """Amount of ``schedule`` still locked at ``instant``.

    Nothing unlocks before the cliff ends. After it, each complete unlock
    period releases ``unlock_rate_amount``. A schedule with a zero period or
    zero rate stays fully locked after the cliff.
    """
    elapsed = (instant - schedule.start_time).total_seconds()
    cliff = schedule.cliff_hours * _SECONDS_PER_HOUR
    if elapsed < cliff:
        return schedule.locked_amount
    if not _unlocks(schedule):
        return schedule.locked_amount

    period = schedule.unlock_period_hours * _SECONDS_PER_HOUR
    periods_elapsed = math.floor((elapsed - cliff) / period)
    unlocked = periods_elapsed * schedule.unlock_rate_amount
    return max(0.0, schedule.locked_amount - unlocked)


def total_locked(schedules: Iterable[VestingSchedule], instant: datetime) -> float:
    """Sum of ``locked_remaining`` across concurrent schedules."""
    return sum((locked_remaining(s, instant) for s in schedules), 0.0)


def unlock_boundaries(schedule: VestingSchedule, until: datetime) -> Iterator[datetime]:
    """Yield the cliff end and every unlock period boundary up to ``until``.

    Boundaries run for ``ceil(locked_amount / unlock_rate_amount)`` periods
    after the cliff, after which the schedule is fully unlocked.
    """
    cliff_end = schedule.start_time + timedelta(hours=schedule.cliff_hours)
    if not _unlocks(schedule):
        if cliff_end <= until:
            yield cliff_end
        return

    period = timedelta(hours=schedule.unlock_period_hours)
    total_periods = math.ceil(schedule.locked_amount / schedule.unlock_rate_amount)
    for i in range(total_periods + 1):
        boundary = cliff_end + i * period
        if boundary > until:
            break
        yield boundary

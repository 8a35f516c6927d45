"""Timeline extender - inserts vesting unlock points and extends to coverage end."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime

from staker_timeline.engine.instants import format_instant, parse_instant
from staker_timeline.engine.vesting import total_locked, unlock_boundaries
from staker_timeline.models.records import TimelinePoint, VestingSchedule, round_amount

log = logging.getLogger(__name__)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def coverage_end_timestamp(end: str) -> str:
    """Timestamp marking the end of archive coverage.

    A bare date covers the whole day, so ``2025-03-01`` becomes
    ``2025-03-01T23:59:59Z``.
    """
    end = end.strip()
    if _DATE_ONLY.match(end):
        return f"{end}T23:59:59Z"
    return end


def _latest(points: list[TimelinePoint], instants: list[datetime]) -> int:
    """Index of the chronologically last point (last in list order on ties)."""
    best = 0
    for idx in range(1, len(points)):
        if instants[idx] >= instants[best]:
            best = idx
    return best


def _preceding(points: list[TimelinePoint], instants: list[datetime], at: datetime) -> int:
    """Index of the nearest point at or before ``at``.

    ``points`` is not sorted while synthetic points are being appended.
    Falls back to the first point when none precedes ``at``.
    """
    best: int | None = None
    for idx, instant in enumerate(instants):
        if instant > at:
            continue
        if best is None or instant >= instants[best]:
            best = idx
    return 0 if best is None else best


def _locked_at(schedules: list[VestingSchedule], at: datetime, staked: float) -> float:
    return max(0.0, round_amount(min(staked, total_locked(schedules, at))))


def extend_timeline(
    timeline: list[TimelinePoint],
    schedules: list[VestingSchedule],
    coverage_end: str,
) -> list[TimelinePoint]:
    """Return the finished timeline for the presentation layer.

    Without vesting the last point is carried forward to ``coverage_end``.
    With vesting, a synthetic point is added at every unlock boundary not
    already in the timeline, plus one at ``coverage_end``, and the result is
    re-sorted chronologically.
    """
    if not timeline or not coverage_end:
        return list(timeline)

    result = list(timeline)
    end_time = parse_instant(coverage_end)

    if not schedules:
        last = result[-1]
        if end_time > parse_instant(last.date):
            result.append(replace(last, date=coverage_end))
        return result

    instants = [parse_instant(p.date) for p in result]
    seen = set(instants)
    added = 0

    for schedule in schedules:
        for boundary in unlock_boundaries(schedule, end_time):
            if boundary in seen:
                continue
            prev = result[_preceding(result, instants, boundary)]
            result.append(TimelinePoint(
                date=format_instant(boundary),
                staked=prev.staked,
                unstaked=prev.unstaked,
                locked=_locked_at(schedules, boundary, prev.staked),
                realized_rewards=prev.realized_rewards,
            ))
            instants.append(boundary)
            seen.add(boundary)
            added += 1

    last_idx = _latest(result, instants)
    if end_time > instants[last_idx]:
        last = result[last_idx]
        result.append(TimelinePoint(
            date=coverage_end,
            staked=last.staked,
            unstaked=last.unstaked,
            locked=_locked_at(schedules, end_time, last.staked),
            realized_rewards=last.realized_rewards,
        ))
        instants.append(end_time)

    log.debug("Added %d unlock points across %d schedules", added, len(schedules))

    order = sorted(range(len(result)), key=lambda i: instants[i])
    return [result[i] for i in order]

"""Balance accumulator - replays a wallet's events into a balance timeline."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Sequence

from staker_timeline.engine.instants import parse_instant
from staker_timeline.engine.vesting import total_locked
from staker_timeline.models.events import EventType, StakerEvent, describe_event_type, parse_event
from staker_timeline.models.records import (
    Operation,
    TimelinePoint,
    VestingSchedule,
    round_amount,
)

log = logging.getLogger(__name__)

DEFAULT_EXPLORER_URL = "https://solscan.io/tx"


class VestingScheduleSet:
    """Concurrent vesting schedules of one wallet, in declaration order.

    The archive carries no position id, so a set_vesting event is matched to
    an existing schedule by exact equality of ``locked_amount``. Two positions
    locking the same amount collapse into one schedule, and an update that
    changes the locked amount is seen as a new schedule. Callers with a stable
    identity can pass ``key`` to ``upsert`` instead.
    """

    def __init__(self) -> None:
        self._schedules: list[VestingSchedule] = []

    def __iter__(self) -> Iterator[VestingSchedule]:
        return iter(self._schedules)

    def __len__(self) -> int:
        return len(self._schedules)

    def __bool__(self) -> bool:
        return bool(self._schedules)

    def upsert(self, schedule: VestingSchedule, key: str | None = None) -> bool:
        """Replace the matching schedule in place or append a new one.

        Returns True if an existing schedule was replaced.
        """
        if key is not None:
            schedule.key = key

        for idx, existing in enumerate(self._schedules):
            if key is not None:
                same = existing.key == key
            else:
                same = existing.locked_amount == schedule.locked_amount
            if same:
                self._schedules[idx] = schedule
                return True
        self._schedules.append(schedule)
        return False

    def as_list(self) -> list[VestingSchedule]:
        return list(self._schedules)


def _operation_amount(event: StakerEvent) -> float:
    """Type-specific amount shown for an operation."""
    kind = event.event_type
    if kind in (EventType.INITIALIZE, EventType.STAKE, EventType.UNSTAKE):
        return abs(event.d_stake)
    if kind == EventType.WITHDRAW:
        return abs(event.d_pending)
    if kind in (EventType.COMPOUND, EventType.CLAIM):
        return event.reward_sol
    if kind == EventType.SET_VESTING:
        return abs(event.d_stake)  # newly locked amount for the position
    return 0.0


def _vesting_schedule(event: StakerEvent, locked_amount: float) -> VestingSchedule | None:
    """Build a schedule from a set_vesting event, or None if it cannot unlock."""
    params = event.vesting_params()
    if locked_amount <= 0 or params.unlock_period_hours <= 0 or params.unlock_rate <= 0:
        log.debug(
            "Ignoring set_vesting %s: locked=%s period=%s rate=%s",
            event.signature, locked_amount, params.unlock_period_hours, params.unlock_rate,
        )
        return None
    return VestingSchedule(
        start_time=parse_instant(event.timestamp),
        locked_amount=locked_amount,
        cliff_hours=params.cliff_hours,
        unlock_period_hours=params.unlock_period_hours,
        unlock_rate_amount=params.unlock_rate,
    )


def _point(date: str, staked: float, unstaked: float, locked: float, rewards: float) -> TimelinePoint:
    return TimelinePoint(
        date=date,
        staked=max(0.0, round_amount(staked)),
        unstaked=max(0.0, round_amount(unstaked)),
        locked=max(0.0, round_amount(locked)),
        realized_rewards=max(0.0, round_amount(rewards)),
    )


def build_balance_timeline(
    rows: Iterable[Sequence[Any]],
    explorer_url: str = DEFAULT_EXPLORER_URL,
) -> tuple[list[TimelinePoint], list[Operation], list[VestingSchedule]]:
    """Replay one wallet's archive rows in log order.

    Returns ``(timeline, operations, vesting_schedules)`` with one timeline
    point and one operation per well-formed row. Rows with fewer than 11
    fields or an unparseable timestamp are skipped.
    """
    timeline: list[TimelinePoint] = []
    operations: list[Operation] = []
    schedules = VestingScheduleSet()

    staked = 0.0
    unstaked = 0.0  # "pending" in the archive
    realized_rewards = 0.0
    explorer_base = explorer_url.rstrip("/")

    for row in rows:
        event = parse_event(row)
        if event is None:
            continue
        try:
            event_time = parse_instant(event.timestamp)
        except ValueError:
            log.debug("Skipping event %s with bad timestamp %r", event.signature, event.timestamp)
            continue

        staked += event.d_stake
        unstaked += event.d_pending

        amount = _operation_amount(event)
        kind = event.event_type
        if kind in (EventType.COMPOUND, EventType.CLAIM):
            realized_rewards += event.reward_sol
        elif kind == EventType.SET_VESTING:
            schedule = _vesting_schedule(event, amount)
            if schedule is not None:
                replaced = schedules.upsert(schedule)
                log.debug(
                    "%s vesting schedule of %s at %s",
                    "Updated" if replaced else "Added", amount, event.timestamp,
                )

        locked = min(staked, total_locked(schedules, event_time))
        timeline.append(_point(event.timestamp, staked, unstaked, locked, realized_rewards))

        type_id, type_label = describe_event_type(event.type)
        operations.append(Operation(
            date=event.timestamp,
            type=type_id,
            type_label=type_label,
            amount=round_amount(amount),
            signature=event.signature,
            explorer_url=f"{explorer_base}/{event.signature}",
        ))

    return timeline, operations, schedules.as_list()

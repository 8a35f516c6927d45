"""Summary derivation over a finished timeline."""

from __future__ import annotations

from typing import Any, Sequence

from staker_timeline.engine.instants import parse_instant
from staker_timeline.models.records import Operation, TimelinePoint, WalletSummary, round_amount

_SECONDS_PER_DAY = 86400


def _current(current: Sequence[Any] | None, idx: int, fallback: float) -> float:
    if current is None or idx >= len(current) or current[idx] is None:
        return fallback
    try:
        return float(current[idx])
    except (TypeError, ValueError):
        return fallback


def days_between(first: str, last: str, fallback: int) -> int:
    """Inclusive whole-day count from ``first`` to ``last``."""
    try:
        delta = parse_instant(last) - parse_instant(first)
    except ValueError:
        return fallback
    return int(delta.total_seconds() // _SECONDS_PER_DAY) + 1


def derive_summary(
    timeline: list[TimelinePoint],
    operations: list[Operation],
    current: Sequence[Any] | None = None,
) -> WalletSummary:
    """Build a WalletSummary from a finished, non-empty timeline.

    ``current`` is the archive's ``[staked, unstaked, ...]`` snapshot for the
    wallet; present values win over the timeline's last point.
    """
    first = timeline[0]
    last = timeline[-1]
    first_date = first.date
    # Last real activity, not the extended timeline end
    last_activity = operations[-1].date if operations else first_date

    return WalletSummary(
        total_operations=len(operations),
        current_staked=round_amount(_current(current, 0, last.staked)),
        current_unstaked=round_amount(_current(current, 1, last.unstaked)),
        current_locked=round_amount(last.locked),
        realized_rewards=last.realized_rewards,
        first_stake_date=first_date,
        last_activity_date=last_activity,
        days_active=days_between(first_date, last_activity, len(timeline)),
    )

"""Staking event models deserialized from the compressed event archive."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Sequence

log = logging.getLogger(__name__)

# Archive rows are positional:
#   [signature, timestamp, slot, type, address,
#    d_stake, d_pending, d_withdrawn, d_compounded, fee_payer, reward_sol, ...]
MIN_EVENT_FIELDS = 11

# Extension fields carried by set_vesting rows (index 11 is the treasury balance)
_CLIFF_HOURS = 12
_UNLOCK_PERIOD_HOURS = 13
_UNLOCK_RATE = 14


class EventType(IntEnum):
    """On-chain staking action. Ordinals are fixed by the archive format."""

    INITIALIZE = 0
    STAKE = 1
    UNSTAKE = 2
    WITHDRAW = 3
    COMPOUND = 4
    CLAIM = 5
    SET_VESTING = 6

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    EventType.INITIALIZE: "Initialize Position",
    EventType.STAKE: "Stake",
    EventType.UNSTAKE: "Unstake",
    EventType.WITHDRAW: "Withdraw",
    EventType.COMPOUND: "Compound",
    EventType.CLAIM: "Claim Rewards",
    EventType.SET_VESTING: "Set Vesting Strategy",
}

UNKNOWN_TYPE = ("unknown", "Unknown")


def describe_event_type(ordinal: int) -> tuple[str, str]:
    """Return ``(type_id, label)`` for an ordinal, tolerating unknown values."""
    try:
        event_type = EventType(ordinal)
    except (ValueError, TypeError):
        return UNKNOWN_TYPE
    return event_type.name.lower(), event_type.label


def _num(value: Any) -> float:
    """Coerce a nullable numeric field to float (null/missing -> 0.0)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class VestingParams:
    """Extension fields of a set_vesting row."""

    cliff_hours: float = 0.0
    unlock_period_hours: float = 0.0
    unlock_rate: float = 0.0


@dataclass(frozen=True)
class StakerEvent:
    """One row of the event archive.

    Deltas are signed changes applied to the wallet's running totals.
    ``type`` is the raw ordinal, which may fall outside ``EventType``.
    """

    signature: str
    timestamp: str  # ISO 8601
    slot: int
    type: int
    address: str
    d_stake: float
    d_pending: float
    d_withdrawn: float
    d_compounded: float
    fee_payer: str | None
    reward_sol: float
    extra: tuple = field(default_factory=tuple)

    @property
    def event_type(self) -> EventType | None:
        try:
            return EventType(self.type)
        except ValueError:
            return None

    def vesting_params(self) -> VestingParams:
        """Read the vesting extension fields (zero when absent)."""
        row = (None,) * MIN_EVENT_FIELDS + self.extra

        def _at(idx: int) -> float:
            return _num(row[idx]) if idx < len(row) else 0.0

        return VestingParams(
            cliff_hours=_at(_CLIFF_HOURS),
            unlock_period_hours=_at(_UNLOCK_PERIOD_HOURS),
            unlock_rate=_at(_UNLOCK_RATE),
        )


def parse_event(row: Sequence[Any]) -> StakerEvent | None:
    """Parse a raw archive row into a StakerEvent.

    Returns None if the row has fewer than 11 fields.
    """
    if len(row) < MIN_EVENT_FIELDS:
        log.debug("Skipping malformed event row with %d fields", len(row))
        return None

    try:
        slot = int(row[2] or 0)
    except (TypeError, ValueError):
        slot = 0
    try:
        type_ordinal = int(row[3])
    except (TypeError, ValueError):
        type_ordinal = -1

    return StakerEvent(
        signature=str(row[0]),
        timestamp=str(row[1]),
        slot=slot,
        type=type_ordinal,
        address=str(row[4]),
        d_stake=_num(row[5]),
        d_pending=_num(row[6]),
        d_withdrawn=_num(row[7]),
        d_compounded=_num(row[8]),
        fee_payer=row[9] or None,
        reward_sol=_num(row[10]),
        extra=tuple(row[MIN_EVENT_FIELDS:]),
    )

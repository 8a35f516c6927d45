"""Record types produced by balance reconstruction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# All balances are rounded to this many decimals when computed
PRECISION = 6


def round_amount(value: float) -> float:
    """Round a balance to the fixed archive precision."""
    return round(value, PRECISION) + 0.0  # normalizes -0.0


@dataclass
class VestingSchedule:
    """A cliff + fixed-period linear unlock attached to one staking position.

    Identity between set_vesting events is the exact ``locked_amount``
    unless the caller supplies an explicit ``key`` (see VestingScheduleSet).
    """

    start_time: datetime
    locked_amount: float
    cliff_hours: float
    unlock_period_hours: float
    unlock_rate_amount: float
    key: str | None = None


@dataclass
class TimelinePoint:
    """Wallet balances at one instant, real or synthetic."""

    date: str  # ISO 8601
    staked: float
    unstaked: float
    locked: float
    realized_rewards: float


@dataclass
class Operation:
    """A user-facing record of one real archive event."""

    date: str
    type: str  # "stake", "claim", ..., "unknown"
    type_label: str
    amount: float
    signature: str
    explorer_url: str = ""


@dataclass
class WalletSummary:
    """Terminal snapshot derived from a finished timeline."""

    total_operations: int
    current_staked: float
    current_unstaked: float
    current_locked: float
    realized_rewards: float
    first_stake_date: str
    last_activity_date: str
    days_active: int


@dataclass
class AddressRecord:
    """Per-wallet entry of the archive ``addresses`` map."""

    first_event: int | None = None
    last_event: int | None = None
    # [staked, unstaked, withdrawn, compounded, total_rewards]
    current: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> AddressRecord:
        if not isinstance(raw, dict):
            return cls()
        current = raw.get("current")
        return cls(
            first_event=raw.get("first_event"),
            last_event=raw.get("last_event"),
            current=list(current) if isinstance(current, (list, tuple)) else [],
        )

    @property
    def has_event_indices(self) -> bool:
        return self.first_event is not None and self.last_event is not None


@dataclass
class ArchiveMeta:
    """Coverage metadata of the event archive."""

    start: str = ""
    end: str = ""
    total_wallets: int = 0
    total_events: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> ArchiveMeta:
        if not isinstance(raw, dict):
            return cls()
        return cls(
            start=str(raw.get("start") or ""),
            end=str(raw.get("end") or ""),
            total_wallets=int(raw.get("total_wallets") or 0),
            total_events=int(raw.get("total_events") or 0),
        )

"""Shared fixtures for staker_timeline tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from staker_timeline.archive.store import EventStore
from staker_timeline.models.records import VestingSchedule

from tests.factories import (
    OTHER_WALLET,
    WALLET,
    make_archive,
    make_event_row,
    make_vesting_row,
)

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_schedule(
    locked: float = 250,
    cliff_hours: float = 24,
    unlock_period_hours: float = 24,
    unlock_rate: float = 100,
    start: datetime = T0,
) -> VestingSchedule:
    return VestingSchedule(
        start_time=start,
        locked_amount=locked,
        cliff_hours=cliff_hours,
        unlock_period_hours=unlock_period_hours,
        unlock_rate_amount=unlock_rate,
    )


@pytest.fixture
def schedule():
    """cliff 24h, 24h periods of 100, 250 locked, starting at T0."""
    return make_schedule()


@pytest.fixture
def archive_doc():
    """Two interleaved wallets; WALLET stakes, unstakes, claims and vests."""
    rows = [
        make_event_row("2025-01-01T00:00:00Z", type_=0, d_stake=1000.0),
        make_event_row("2025-01-01T06:00:00Z", type_=1, d_stake=50.0, address=OTHER_WALLET),
        make_vesting_row(250, timestamp="2025-01-02T00:00:00Z"),
        make_event_row("2025-01-03T12:00:00Z", type_=5, reward_sol=0.25),
        make_event_row("2025-01-04T00:00:00Z", type_=2, d_stake=-200.0, d_pending=200.0),
        make_event_row("2025-01-05T00:00:00Z", type_=3, d_pending=-200.0),
        make_event_row("2025-01-06T00:00:00Z", type_=4, d_stake=10.0, reward_sol=0.05),
    ]
    return make_archive(rows, start="2025-01-01", end="2025-01-20")


@pytest.fixture
def store(archive_doc):
    return EventStore.from_dict(archive_doc)

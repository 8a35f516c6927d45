"""Timeline extender: carry-forward, unlock boundary points and sorting."""

from __future__ import annotations

import pytest

from staker_timeline.engine.accumulator import build_balance_timeline
from staker_timeline.engine.extender import coverage_end_timestamp, extend_timeline
from staker_timeline.models.events import EventType

from tests.factories import make_event_row, make_vesting_row


def _extend(rows, end="2025-01-10"):
    timeline, _, schedules = build_balance_timeline(rows)
    return extend_timeline(timeline, schedules, coverage_end_timestamp(end))


@pytest.mark.parametrize(
    "end, expected",
    [
        ("2025-03-01", "2025-03-01T23:59:59Z"),
        (" 2025-03-01 ", "2025-03-01T23:59:59Z"),
        ("2025-03-01T12:00:00Z", "2025-03-01T12:00:00Z"),
    ],
)
def test_coverage_end_timestamp(end, expected):
    assert coverage_end_timestamp(end) == expected


# ── Without vesting ────────────────────────────────────


def test_single_event_is_carried_to_coverage_end():
    rows = [make_event_row("2025-01-01T08:00:00Z", EventType.STAKE, d_stake=500.0, d_pending=5.0)]
    timeline = _extend(rows, end="2025-01-11")

    assert len(timeline) == 2
    first, last = timeline
    assert last.date == "2025-01-11T23:59:59Z"
    assert (last.staked, last.unstaked, last.locked, last.realized_rewards) == (
        first.staked, first.unstaked, first.locked, first.realized_rewards,
    )


def test_no_extension_when_coverage_ends_before_last_event():
    rows = [make_event_row("2025-02-01T00:00:00Z", EventType.STAKE, d_stake=500.0)]
    assert len(_extend(rows, end="2025-01-15")) == 1


def test_no_extension_without_coverage_end():
    timeline, _, schedules = build_balance_timeline(
        [make_event_row("2025-01-01T00:00:00Z", EventType.STAKE, d_stake=1.0)]
    )
    assert extend_timeline(timeline, schedules, "") == timeline


def test_extension_does_not_mutate_input():
    timeline, _, schedules = build_balance_timeline(
        [make_event_row("2025-01-01T00:00:00Z", EventType.STAKE, d_stake=1.0)]
    )
    extend_timeline(timeline, schedules, "2025-01-05T23:59:59Z")
    assert len(timeline) == 1


# ── With vesting ───────────────────────────────────────


def test_unlock_boundaries_become_synthetic_points():
    rows = [
        make_event_row("2024-12-31T23:00:00Z", EventType.STAKE, d_stake=1000.0),
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
    ]
    timeline = _extend(rows)

    assert [p.date for p in timeline] == [
        "2024-12-31T23:00:00Z",
        "2025-01-01T00:00:00Z",
        "2025-01-02T00:00:00Z",
        "2025-01-03T00:00:00Z",
        "2025-01-04T00:00:00Z",
        "2025-01-05T00:00:00Z",
        "2025-01-10T23:59:59Z",
    ]
    assert [p.locked for p in timeline] == [0, 250, 250, 150, 50, 0, 0]
    assert all(p.staked == 1250.0 for p in timeline[1:])


def test_boundary_matching_an_event_is_not_duplicated():
    rows = [
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_event_row("2025-01-03T00:00:00Z", EventType.CLAIM, reward_sol=0.5),
    ]
    timeline = _extend(rows)
    dates = [p.date for p in timeline]

    assert dates.count("2025-01-03T00:00:00Z") == 1
    assert len(timeline) == 2 + 3 + 1


def test_synthetic_points_carry_forward_nearest_preceding_balances():
    rows = [
        make_event_row("2025-01-01T00:00:00Z", EventType.STAKE, d_stake=1000.0),
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_event_row("2025-01-03T12:00:00Z", EventType.UNSTAKE, d_stake=-1000.0, d_pending=1000.0),
        make_event_row("2025-01-03T13:00:00Z", EventType.CLAIM, reward_sol=0.2),
    ]
    by_date = {p.date: p for p in _extend(rows)}

    before = by_date["2025-01-03T00:00:00Z"]
    assert (before.staked, before.unstaked, before.locked) == (1250.0, 0.0, 150.0)

    after = by_date["2025-01-04T00:00:00Z"]
    assert (after.staked, after.unstaked, after.locked) == (250.0, 1000.0, 50.0)
    assert after.realized_rewards == 0.2


def test_locked_at_boundary_is_clamped_to_carried_stake():
    rows = [
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_event_row("2025-01-01T01:00:00Z", EventType.UNSTAKE, d_stake=-230.0, d_pending=230.0),
    ]
    by_date = {p.date: p for p in _extend(rows)}
    assert by_date["2025-01-02T00:00:00Z"].locked == 20.0
    assert by_date["2025-01-04T00:00:00Z"].locked == 20.0
    assert by_date["2025-01-05T00:00:00Z"].locked == 0.0


def test_two_schedules_lock_pointwise_sum():
    rows = [
        make_event_row("2025-01-01T00:00:00Z", EventType.STAKE, d_stake=5000.0),
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_vesting_row(300, cliff_hours=0, unlock_period_hours=48, unlock_rate=150,
                         timestamp="2025-01-01T12:00:00Z"),
    ]
    by_date = {p.date: p for p in _extend(rows)}

    # schedule A: 250 until Jan 2, 150 at Jan 3, 50 at Jan 4, 0 from Jan 5
    # schedule B: 300 until Jan 3 12:00, 150 until Jan 5 12:00, then 0
    assert by_date["2025-01-01T12:00:00Z"].locked == 550.0
    assert by_date["2025-01-02T00:00:00Z"].locked == 550.0
    assert by_date["2025-01-03T00:00:00Z"].locked == 450.0
    assert by_date["2025-01-03T12:00:00Z"].locked == 300.0
    assert by_date["2025-01-04T00:00:00Z"].locked == 200.0
    assert by_date["2025-01-05T00:00:00Z"].locked == 150.0
    assert by_date["2025-01-05T12:00:00Z"].locked == 0.0
    assert by_date["2025-01-10T23:59:59Z"].locked == 0.0


def test_shared_boundaries_across_schedules_appear_once():
    rows = [
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_vesting_row(100, timestamp="2025-01-01T00:00:00Z"),
    ]
    dates = [p.date for p in _extend(rows)]
    synthetic = dates[2:]
    assert len(synthetic) == len(set(synthetic))
    assert dates.count("2025-01-02T00:00:00Z") == 1


def test_boundaries_after_coverage_end_are_dropped():
    rows = [make_vesting_row(250, timestamp="2025-01-01T00:00:00Z")]
    timeline = _extend(rows, end="2025-01-02")

    assert [p.date for p in timeline] == [
        "2025-01-01T00:00:00Z",
        "2025-01-02T00:00:00Z",
        "2025-01-02T23:59:59Z",
    ]


def test_extended_timeline_is_sorted_and_respects_invariants():
    rows = [
        make_event_row("2025-01-01T00:00:00Z", EventType.STAKE, d_stake=300.0),
        make_vesting_row(250, timestamp="2025-01-01T00:00:00Z"),
        make_event_row("2025-01-02T06:00:00Z", EventType.UNSTAKE, d_stake=-500.0, d_pending=500.0),
        make_vesting_row(400, unlock_period_hours=6, timestamp="2025-01-02T08:00:00Z"),
    ]
    timeline = _extend(rows)
    dates = [p.date for p in timeline]

    assert dates == sorted(dates)
    for p in timeline:
        assert 0 <= p.locked <= p.staked

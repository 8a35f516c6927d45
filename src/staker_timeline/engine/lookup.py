"""Wallet lookup - reconstructs one wallet's timeline from the event store."""

from __future__ import annotations

import logging

from staker_timeline.archive.store import EventStore
from staker_timeline.engine.accumulator import DEFAULT_EXPLORER_URL, build_balance_timeline
from staker_timeline.engine.extender import coverage_end_timestamp, extend_timeline
from staker_timeline.engine.summary import derive_summary
from staker_timeline.models.snapshots import WalletTimeline

log = logging.getLogger(__name__)


def build_wallet_timeline(
    address: str,
    store: EventStore,
    explorer_url: str = DEFAULT_EXPLORER_URL,
) -> WalletTimeline:
    """Rebuild the full balance history of ``address``.

    Nothing is cached: every call replays the wallet's events from scratch.
    A wallet that cannot be reconstructed yields ``found=False`` with a
    reason distinguishing the failure.
    """
    wallet = address.strip()

    record = store.address_record(wallet)
    if record is None:
        return WalletTimeline.not_found(
            wallet,
            f"Wallet not found in archive. Total wallets: {store.wallet_count:,}",
        )
    if not record.has_event_indices:
        return WalletTimeline.not_found(wallet, "Wallet has no event data")

    rows = store.events_for(wallet)
    if not rows:
        return WalletTimeline.not_found(wallet, "No events found for wallet")

    timeline, operations, schedules = build_balance_timeline(rows, explorer_url)
    if not timeline:
        return WalletTimeline.not_found(wallet, "Failed to build timeline")

    if store.meta.end:
        end = coverage_end_timestamp(store.meta.end)
        try:
            timeline = extend_timeline(timeline, schedules, end)
        except ValueError:
            log.warning("Archive end date %r is not a valid instant; timeline not extended", end)

    summary = derive_summary(timeline, operations, record.current or None)
    log.debug(
        "Built timeline for %s: %d events, %d points, %d vesting schedules",
        wallet, len(operations), len(timeline), len(schedules),
    )
    return WalletTimeline(
        wallet=wallet,
        found=True,
        date_range=(timeline[0].date, timeline[-1].date),
        timeline=timeline,
        operations=operations,
        summary=summary,
    )

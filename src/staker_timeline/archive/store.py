"""Event store - decoded in-memory representation of the event archive."""

from __future__ import annotations

from typing import Any

from staker_timeline.archive.errors import ArchiveDecodeError
from staker_timeline.models.records import AddressRecord, ArchiveMeta


class EventStore:
    """Addresses map, flat event log and coverage metadata.

    Events for all wallets are interleaved in one chronological list.
    ``first_event``/``last_event`` in the address map are only hints, so
    per-wallet access always filters the whole log.
    """

    def __init__(
        self,
        addresses: dict[str, Any],
        events: list[list[Any]],
        meta: ArchiveMeta,
    ) -> None:
        self._addresses = addresses
        self._events = events
        self.meta = meta

    @classmethod
    def from_dict(cls, raw: Any) -> EventStore:
        """Build from the decoded archive JSON document."""
        if not isinstance(raw, dict):
            raise ArchiveDecodeError(
                f"archive root must be an object, got {type(raw).__name__}"
            )
        addresses = raw.get("addresses") or {}
        events = raw.get("events") or []
        if not isinstance(addresses, dict):
            raise ArchiveDecodeError("archive 'addresses' must be an object")
        if not isinstance(events, list):
            raise ArchiveDecodeError("archive 'events' must be an array")
        return cls(
            addresses=addresses,
            events=[e for e in events if isinstance(e, (list, tuple))],
            meta=ArchiveMeta.from_dict(raw.get("meta")),
        )

    @property
    def wallet_count(self) -> int:
        return len(self._addresses)

    @property
    def event_count(self) -> int:
        return len(self._events)

    def address_record(self, address: str) -> AddressRecord | None:
        """Address map entry for ``address``, or None if the wallet never staked."""
        raw = self._addresses.get(address)
        if raw is None:
            return None
        return AddressRecord.from_dict(raw)

    def events_for(self, address: str) -> list[list[Any]]:
        """All raw rows whose address field matches, in log order."""
        return [e for e in self._events if len(e) > 4 and e[4] == address]

"""JSON-serializable lookup results for the presentation layer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from staker_timeline.models.records import Operation, TimelinePoint, WalletSummary


@dataclass
class WalletTimeline:
    """Result of one wallet lookup.

    ``found`` is False for every negative outcome; ``error`` then holds a
    human-readable reason and the remaining fields stay empty.
    """

    wallet: str
    found: bool
    error: str | None = None
    date_range: tuple[str, str] | None = None
    timeline: list[TimelinePoint] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)
    summary: WalletSummary | None = None

    @classmethod
    def not_found(cls, wallet: str, error: str) -> WalletTimeline:
        return cls(wallet=wallet, found=False, error=error)

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.date_range is not None:
            data["date_range"] = list(self.date_range)
        if not self.found:
            for key in ("date_range", "timeline", "operations", "summary"):
                data.pop(key)
        return data

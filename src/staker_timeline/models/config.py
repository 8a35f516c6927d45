"""Configuration models."""

from __future__ import annotations

from dataclasses import dataclass

MIB = 1024 * 1024


@dataclass
class TimelineConfig:
    """Complete lookup configuration."""

    # Archive
    archive_url: str = "data/staker_cache.json.gz"  # URL or local path
    fetch_timeout: int = 30  # seconds
    max_compressed_bytes: int = 10 * MIB
    max_decompressed_bytes: int = 50 * MIB

    # Lookup
    debounce_seconds: float = 0.5
    explorer_url: str = "https://solscan.io/tx"

    # Logging
    log_level: str = "info"

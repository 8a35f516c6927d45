"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from staker_timeline.models.config import TimelineConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "STAKER_TIMELINE_",
) -> TimelineConfig:
    """Load lookup configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (STAKER_TIMELINE_ARCHIVE_URL, etc.)
        2. TOML config file
        3. Defaults from TimelineConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = TimelineConfig()

    # ── Archive section ────────────────────────────────────
    archive = raw.get("archive", {})
    if v := archive.get("url"):
        cfg.archive_url = str(v)
    if v := archive.get("fetch_timeout"):
        cfg.fetch_timeout = int(v)
    if v := archive.get("max_compressed_bytes"):
        cfg.max_compressed_bytes = int(v)
    if v := archive.get("max_decompressed_bytes"):
        cfg.max_decompressed_bytes = int(v)

    # ── Lookup section ─────────────────────────────────────
    lookup = raw.get("lookup", {})
    if (v := lookup.get("debounce_seconds")) is not None:
        cfg.debounce_seconds = float(v)
    if v := lookup.get("explorer_url"):
        cfg.explorer_url = str(v)

    # ── Logging section ────────────────────────────────────
    logging_raw = raw.get("logging", {})
    if v := logging_raw.get("level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}ARCHIVE_URL"):
        cfg.archive_url = url
    if level := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        cfg.log_level = level
    if debounce := os.environ.get(f"{env_prefix}DEBOUNCE"):
        cfg.debounce_seconds = float(debounce)

    return cfg

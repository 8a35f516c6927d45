"""Configuration loading from TOML and environment."""

from __future__ import annotations

from staker_timeline.config import load_config
from staker_timeline.models.config import MIB


def test_defaults(monkeypatch):
    monkeypatch.delenv("STAKER_TIMELINE_ARCHIVE_URL", raising=False)
    cfg = load_config(None)
    assert cfg.max_compressed_bytes == 10 * MIB
    assert cfg.max_decompressed_bytes == 50 * MIB
    assert cfg.debounce_seconds == 0.5
    assert cfg.explorer_url == "https://solscan.io/tx"


def test_toml_file(tmp_path, monkeypatch):
    monkeypatch.delenv("STAKER_TIMELINE_ARCHIVE_URL", raising=False)
    monkeypatch.delenv("STAKER_TIMELINE_DEBOUNCE", raising=False)
    path = tmp_path / "staker.toml"
    path.write_text(
        '[archive]\n'
        'url = "https://example.test/staker_cache.json.gz"\n'
        'fetch_timeout = 12\n'
        'max_compressed_bytes = 1024\n'
        '\n'
        '[lookup]\n'
        'debounce_seconds = 0\n'
        'explorer_url = "https://explorer.test/tx"\n'
        '\n'
        '[logging]\n'
        'level = "debug"\n'
    )
    cfg = load_config(path)

    assert cfg.archive_url == "https://example.test/staker_cache.json.gz"
    assert cfg.fetch_timeout == 12
    assert cfg.max_compressed_bytes == 1024
    assert cfg.max_decompressed_bytes == 50 * MIB
    assert cfg.debounce_seconds == 0.0
    assert cfg.explorer_url == "https://explorer.test/tx"
    assert cfg.log_level == "debug"


def test_missing_file_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "nope.toml")
    assert cfg.fetch_timeout == 30


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "staker.toml"
    path.write_text('[archive]\nurl = "from-file.json.gz"\n')
    monkeypatch.setenv("STAKER_TIMELINE_ARCHIVE_URL", "from-env.json.gz")
    monkeypatch.setenv("STAKER_TIMELINE_LOG_LEVEL", "warning")
    monkeypatch.setenv("STAKER_TIMELINE_DEBOUNCE", "1.5")

    cfg = load_config(path)

    assert cfg.archive_url == "from-env.json.gz"
    assert cfg.log_level == "warning"
    assert cfg.debounce_seconds == 1.5

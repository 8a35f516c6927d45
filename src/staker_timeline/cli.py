"""CLI entry point for staker_timeline."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click

from staker_timeline.archive.cache import ArchiveCache
from staker_timeline.archive.errors import ArchiveError
from staker_timeline.archive.loader import source_for
from staker_timeline.config import load_config
from staker_timeline.models.config import TimelineConfig
from staker_timeline.service import WalletLookupController


def _cache(cfg: TimelineConfig, archive: str | None) -> ArchiveCache:
    source = source_for(
        archive or cfg.archive_url, cfg.fetch_timeout, cfg.max_compressed_bytes,
    )
    return ArchiveCache(source, cfg.max_decompressed_bytes)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """staker-timeline - Rebuild wallet staking history from the event archive."""
    ctx.ensure_object(dict)
    cfg = load_config(config_path)
    ctx.obj["config"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Lookup ─────────────────────────────────────────────


@cli.command()
@click.argument("address")
@click.option("--archive", default=None, help="Archive URL or path (overrides config)")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
def lookup(ctx: click.Context, address: str, archive: str | None, as_json: bool) -> None:
    """Show the staking timeline of one wallet."""
    cfg: TimelineConfig = ctx.obj["config"]
    controller = WalletLookupController(
        _cache(cfg, archive), cfg.debounce_seconds, cfg.explorer_url,
    )

    try:
        result = asyncio.run(controller.lookup(address))
    except ArchiveError as exc:
        _fail(str(exc))
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.found:
            sys.exit(1)
        return

    if not result.found:
        _fail(result.error or "Wallet not found")
        return

    s = result.summary
    click.echo(f"Wallet:          {result.wallet}")
    click.echo(f"Operations:      {s.total_operations}")
    click.echo(f"Staked:          {s.current_staked:.6f}")
    click.echo(f"Unstaked:        {s.current_unstaked:.6f}")
    click.echo(f"Locked:          {s.current_locked:.6f}")
    click.echo(f"Realized (SOL):  {s.realized_rewards:.6f}")
    click.echo(f"First stake:     {s.first_stake_date}")
    click.echo(f"Last activity:   {s.last_activity_date}")
    click.echo(f"Days active:     {s.days_active}")
    click.echo("")
    click.echo(f"{'Date':<26} {'Type':<22} {'Amount':>18}  Signature")
    for op in result.operations:
        click.echo(f"{op.date:<26} {op.type_label:<22} {op.amount:>18.6f}  {op.signature}")


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show effective configuration."""
    cfg: TimelineConfig = ctx.obj["config"]
    click.echo(f"Archive:        {cfg.archive_url}")
    click.echo(f"Fetch timeout:  {cfg.fetch_timeout}s")
    click.echo(f"Max compressed: {cfg.max_compressed_bytes} bytes")
    click.echo(f"Max inflated:   {cfg.max_decompressed_bytes} bytes")
    click.echo(f"Debounce:       {cfg.debounce_seconds}s")
    click.echo(f"Explorer:       {cfg.explorer_url}")
    click.echo(f"Log level:      {cfg.log_level}")


@cli.command()
@click.option("--archive", default=None, help="Archive URL or path (overrides config)")
@click.pass_context
def meta(ctx: click.Context, archive: str | None) -> None:
    """Show archive coverage metadata."""
    cfg: TimelineConfig = ctx.obj["config"]
    cache = _cache(cfg, archive)
    try:
        store = asyncio.run(cache.get())
    except ArchiveError as exc:
        _fail(str(exc))
        return

    click.echo(f"Coverage:  {store.meta.start} to {store.meta.end}")
    click.echo(f"Wallets:   {store.wallet_count} (declared {store.meta.total_wallets})")
    click.echo(f"Events:    {store.event_count} (declared {store.meta.total_events})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

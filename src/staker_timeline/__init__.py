"""staker_timeline - per-wallet staking balance reconstruction from an event archive."""

__version__ = "0.1.0"

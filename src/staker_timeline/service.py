"""Wallet lookup controller - debounced lookups with stale-result protection."""

from __future__ import annotations

import asyncio
import logging

from staker_timeline.archive.errors import ArchiveError
from staker_timeline.engine.accumulator import DEFAULT_EXPLORER_URL
from staker_timeline.engine.lookup import build_wallet_timeline
from staker_timeline.interfaces.provider import ArchiveProvider
from staker_timeline.models.snapshots import WalletTimeline

log = logging.getLogger(__name__)


class WalletLookupController:
    """Runs wallet lookups against a shared archive cache.

    Every ``request()`` takes a new token. A request waits out the debounce
    delay and only starts if its token is still current; once started it
    runs to completion, and its result is committed only if no newer request
    arrived in the meantime.
    """

    def __init__(
        self,
        archive: ArchiveProvider,
        debounce_seconds: float = 0.5,
        explorer_url: str = DEFAULT_EXPLORER_URL,
    ) -> None:
        self._archive = archive
        self._debounce = debounce_seconds
        self._explorer_url = explorer_url
        self._token = 0
        self._tasks: set[asyncio.Task] = set()

        self.data: WalletTimeline | None = None
        self.error: str | None = None
        self.loading = False

    @property
    def token(self) -> int:
        return self._token

    def request(self, address: str | None) -> asyncio.Task | None:
        """Schedule a debounced lookup, superseding any earlier request.

        A blank address clears the current result and schedules nothing.
        """
        self._token += 1
        token = self._token

        if not address or not address.strip():
            self.data = None
            self.error = None
            self.loading = False
            return None

        task = asyncio.create_task(self._run(token, address.strip()))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def lookup(self, address: str) -> WalletTimeline:
        """Look up one wallet immediately. Raises ArchiveError on load failure."""
        store = await self._archive.get()
        return build_wallet_timeline(address, store, self._explorer_url)

    async def wait(self) -> None:
        """Wait for every scheduled request to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Invalidate all outstanding requests; their results are dropped."""
        self._token += 1
        self.loading = False

    def _is_current(self, token: int) -> bool:
        return token == self._token

    async def _run(self, token: int, address: str) -> WalletTimeline | None:
        await asyncio.sleep(self._debounce)
        if not self._is_current(token):
            log.debug("Lookup for %s superseded before start", address)
            return None

        self.loading = True
        self.error = None
        try:
            result = await self.lookup(address)
        except ArchiveError as exc:
            self._fail(token, address, str(exc))
            return None
        except Exception as exc:
            log.exception("Lookup for %s failed", address)
            self._fail(token, address, f"Failed to load timeline: {exc}")
            return None
        finally:
            if self._is_current(token):
                self.loading = False

        if not self._is_current(token):
            log.debug("Dropping stale result for %s", address)
            return None

        self.data = result
        self.error = None if result.found else (result.error or "Wallet not found")
        return result

    def _fail(self, token: int, address: str, message: str) -> None:
        if not self._is_current(token):
            log.debug("Dropping stale failure for %s: %s", address, message)
            return
        self.data = None
        self.error = message

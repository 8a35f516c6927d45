"""Archive loader - fetches and decodes the gzip-compressed event archive."""

from __future__ import annotations

import json
import logging
import time
import zlib
from pathlib import Path

import httpx

from staker_timeline.archive.errors import (
    ArchiveDecodeError,
    ArchiveFetchError,
    ArchiveTooLargeError,
)
from staker_timeline.archive.store import EventStore
from staker_timeline.models.config import MIB

log = logging.getLogger(__name__)

MAX_COMPRESSED_BYTES = 10 * MIB
MAX_DECOMPRESSED_BYTES = 50 * MIB


def _mb(n: int) -> str:
    return f"{n / MIB:.2f}MB"


def _content_length(value: str | None) -> int | None:
    """Parse a Content-Length header; unparseable values count as absent."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        log.debug("Ignoring invalid Content-Length %r", value)
        return None


class HttpArchiveSource:
    """Downloads the compressed archive over HTTP(S).

    The body is streamed and abandoned as soon as it exceeds
    ``max_compressed_bytes``.
    """

    def __init__(
        self,
        url: str,
        timeout: int = 30,
        max_compressed_bytes: int = MAX_COMPRESSED_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._max_bytes = max_compressed_bytes
        self._transport = transport

    @property
    def location(self) -> str:
        return self._url

    async def fetch(self) -> bytes:
        log.info("Fetching event archive from %s", self._url)
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", self._url) as resp:
                    if resp.status_code != 200:
                        raise ArchiveFetchError(
                            f"Failed to load event archive: HTTP {resp.status_code} "
                            f"{resp.reason_phrase}".rstrip()
                        )

                    # Check Content-Length before downloading body
                    content_length = _content_length(resp.headers.get("content-length"))
                    if content_length is not None and content_length > self._max_bytes:
                        raise ArchiveTooLargeError(
                            f"Compressed file too large: {_mb(content_length)} "
                            f"(max {_mb(self._max_bytes)})"
                        )

                    chunks = []
                    total = 0
                    async for chunk in resp.aiter_bytes():
                        total += len(chunk)
                        if total > self._max_bytes:
                            raise ArchiveTooLargeError(
                                f"Compressed file exceeded {_mb(self._max_bytes)} during download"
                            )
                        chunks.append(chunk)
        except httpx.HTTPError as exc:
            raise ArchiveFetchError(f"Failed to load event archive: {exc}") from exc

        data = b"".join(chunks)
        log.info(
            "Fetched %d compressed bytes in %dms",
            len(data), int((time.monotonic() - start) * 1000),
        )
        return data


class FileArchiveSource:
    """Reads the compressed archive from a local file."""

    def __init__(self, path: str | Path, max_compressed_bytes: int = MAX_COMPRESSED_BYTES) -> None:
        self._path = Path(path).expanduser()
        self._max_bytes = max_compressed_bytes

    @property
    def location(self) -> str:
        return str(self._path)

    async def fetch(self) -> bytes:
        log.info("Reading event archive from %s", self._path)
        try:
            size = self._path.stat().st_size
            if size > self._max_bytes:
                raise ArchiveTooLargeError(
                    f"Compressed file too large: {_mb(size)} (max {_mb(self._max_bytes)})"
                )
            return self._path.read_bytes()
        except OSError as exc:
            raise ArchiveFetchError(f"Failed to load event archive: {exc}") from exc


def source_for(
    location: str,
    timeout: int = 30,
    max_compressed_bytes: int = MAX_COMPRESSED_BYTES,
) -> HttpArchiveSource | FileArchiveSource:
    """Pick an archive source for a URL or filesystem path."""
    if location.startswith(("http://", "https://")):
        return HttpArchiveSource(location, timeout, max_compressed_bytes)
    return FileArchiveSource(location, max_compressed_bytes)


def decompress_archive(raw: bytes, max_decompressed_bytes: int = MAX_DECOMPRESSED_BYTES) -> bytes:
    """Gunzip ``raw``, refusing to inflate more than the byte ceiling.

    Every member of a multi-member gzip stream is inflated; the ceiling
    applies to their combined size.
    """
    chunks = []
    total = 0
    remaining = raw
    while True:
        inflater = zlib.decompressobj(16 + zlib.MAX_WBITS)
        try:
            data = inflater.decompress(remaining, max_decompressed_bytes - total + 1)
        except zlib.error as exc:
            raise ArchiveDecodeError(f"Failed to decompress event archive: {exc}") from exc

        total += len(data)
        if total > max_decompressed_bytes:
            raise ArchiveTooLargeError(
                f"Decompressed data too large: more than {_mb(max_decompressed_bytes)}"
            )
        if not inflater.eof:
            raise ArchiveDecodeError("Failed to decompress event archive: truncated gzip stream")
        chunks.append(data)

        # Trailing NUL padding after the last member is allowed
        remaining = inflater.unused_data
        if not remaining.strip(b"\x00"):
            break
    return b"".join(chunks)


def decode_archive(
    raw: bytes,
    max_decompressed_bytes: int = MAX_DECOMPRESSED_BYTES,
) -> EventStore:
    """Decompress and parse a compressed archive into an EventStore."""
    data = decompress_archive(raw, max_decompressed_bytes)
    try:
        doc = json.loads(data)
    except ValueError as exc:
        raise ArchiveDecodeError(f"Failed to parse event archive: {exc}") from exc

    try:
        store = EventStore.from_dict(doc)
    except (TypeError, ValueError) as exc:
        raise ArchiveDecodeError(f"Malformed event archive: {exc}") from exc
    log.info(
        "Decoded event archive: %d wallets, %d events (%s to %s)",
        store.wallet_count, store.event_count, store.meta.start, store.meta.end,
    )
    return store

"""Port: raw audio byte fetcher."""

from __future__ import annotations

from typing import Protocol


class AudioFetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        """Return the full payload at *url*. Raises AudioFetchError on failure."""
        ...

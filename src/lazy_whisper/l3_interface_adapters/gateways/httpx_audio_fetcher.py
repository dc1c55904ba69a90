"""Gateway: httpx audio fetcher — implements AudioFetcher port."""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from lazy_whisper.l1_entities.errors import AudioFetchError


class HttpxAudioFetcher:
    """GETs http(s) URLs with httpx.AsyncClient; ``file://`` URLs and bare paths are read from disk."""

    def __init__(self, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        scheme = urlparse(url).scheme.lower()
        if scheme in ('http', 'https'):
            return await self._fetch_http(url)
        if scheme == 'file':
            return await self._read_file(Path(unquote(urlparse(url).path)))
        if scheme == '' or len(scheme) == 1:  # bare path, or a Windows drive letter
            return await self._read_file(Path(url))
        raise AudioFetchError(f'Unsupported URL scheme: {scheme}')

    async def _fetch_http(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPStatusError as exc:
            raise AudioFetchError(f'HTTP {exc.response.status_code} fetching {url}') from exc
        except httpx.HTTPError as exc:
            raise AudioFetchError(f'Failed to fetch {url}: {exc}') from exc

    @staticmethod
    async def _read_file(path: Path) -> bytes:
        if not path.exists():
            raise AudioFetchError(f'Audio file not found: {path}')
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise AudioFetchError(f'Failed to read {path}: {exc}') from exc

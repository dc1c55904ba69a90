"""Use case: load audio — fetch or unwrap bytes, decode, keep channel 0, resample."""

from __future__ import annotations

import asyncio
import logging
from typing import BinaryIO, Union

import numpy as np

from lazy_whisper.l1_entities.errors import AudioFormatError
from lazy_whisper.l2_use_cases.ports.audio_decoder import AudioDecoder
from lazy_whisper.l2_use_cases.ports.audio_fetcher import AudioFetcher
from lazy_whisper.l2_use_cases.utils.resampler import resample

log = logging.getLogger('lw.audio')

AudioBlob = Union[bytes, bytearray, memoryview, BinaryIO]


def blob_bytes(blob: AudioBlob) -> bytes:
    """Extract the full payload from an in-memory blob or readable file object."""
    if isinstance(blob, (bytes, bytearray, memoryview)):
        return bytes(blob)
    if hasattr(blob, 'read'):
        return bytes(blob.read())
    raise TypeError(f'Unsupported audio blob type: {type(blob).__name__}')


class LoadAudioUseCase:
    """Turns a URL or blob into mono float32 samples at a requested rate.

    Fetching is delegated to an AudioFetcher and decoding to an AudioDecoder;
    decoding runs in a worker thread so the event loop stays responsive.
    """

    def __init__(self, fetcher: AudioFetcher, decoder: AudioDecoder) -> None:
        self._fetcher = fetcher
        self._decoder = decoder

    async def load_from_url(self, url: str, target_rate: int) -> np.ndarray:
        payload = await self._fetcher.fetch(url)
        log.debug('Fetched %d bytes from %s', len(payload), url)
        return await self._decode(payload, target_rate)

    async def load_from_blob(self, blob: AudioBlob, target_rate: int) -> np.ndarray:
        return await self._decode(blob_bytes(blob), target_rate)

    async def _decode(self, payload: bytes, target_rate: int) -> np.ndarray:
        if not payload:
            raise AudioFormatError('Audio payload is empty')

        decoded = await asyncio.to_thread(self._decoder.decode, payload)
        if decoded.num_channels == 0:
            raise AudioFormatError('Decoded audio has no channels')
        if decoded.sample_rate <= 0:
            raise AudioFormatError(f'Decoded audio has invalid sample rate: {decoded.sample_rate}')

        mono = decoded.channel(0)
        log.debug(
            'Decoded %.2fs of audio (%d ch @ %d Hz)',
            decoded.duration,
            decoded.num_channels,
            decoded.sample_rate,
        )
        if decoded.sample_rate != target_rate:
            return resample(mono, decoded.sample_rate, target_rate)
        return mono

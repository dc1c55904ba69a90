"""Tests for LoadAudioUseCase — uses FakeAudioFetcher/FakeAudioDecoder, no ffmpeg."""

from __future__ import annotations

import io

import numpy as np
import pytest

from lazy_whisper.l1_entities.audio import DecodedAudio
from lazy_whisper.l1_entities.errors import AudioFetchError, AudioFormatError
from lazy_whisper.l2_use_cases.load_audio_use_case import LoadAudioUseCase, blob_bytes
from tests.conftest import FakeAudioDecoder, FakeAudioFetcher


def _stereo(rate: int, n: int) -> DecodedAudio:
    left = np.linspace(-1.0, 1.0, n, dtype=np.float32)
    right = np.full(n, 0.9, dtype=np.float32)
    return DecodedAudio(channels=np.stack([left, right]), sample_rate=rate)


class TestBlobBytes:
    def test_bytes_passthrough(self):
        assert blob_bytes(b'abc') == b'abc'

    def test_bytearray_and_memoryview(self):
        assert blob_bytes(bytearray(b'abc')) == b'abc'
        assert blob_bytes(memoryview(b'abc')) == b'abc'

    def test_file_like_is_read(self):
        assert blob_bytes(io.BytesIO(b'recorded')) == b'recorded'

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError, match='Unsupported audio blob'):
            blob_bytes(12345)  # type: ignore[arg-type]


class TestLoadFromUrl:
    @pytest.mark.asyncio
    async def test_fetches_then_decodes(self):
        fetcher = FakeAudioFetcher({'https://x/a.wav': b'payload'})
        decoder = FakeAudioDecoder()
        uc = LoadAudioUseCase(fetcher, decoder)

        audio = await uc.load_from_url('https://x/a.wav', 16000)

        assert fetcher.fetch_calls == ['https://x/a.wav']
        assert decoder.decode_calls == [b'payload']
        assert audio.dtype == np.float32
        assert len(audio) == 16000

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self):
        uc = LoadAudioUseCase(FakeAudioFetcher(), FakeAudioDecoder())
        with pytest.raises(AudioFetchError, match='404'):
            await uc.load_from_url('https://x/missing.wav', 16000)

    @pytest.mark.asyncio
    async def test_resamples_when_rates_differ(self):
        decoder = FakeAudioDecoder(_stereo(48000, 48000))
        uc = LoadAudioUseCase(FakeAudioFetcher({'u': b'p'}), decoder)

        audio = await uc.load_from_url('u', 16000)

        assert len(audio) == 16000


class TestLoadFromBlob:
    @pytest.mark.asyncio
    async def test_takes_channel_zero_only(self):
        decoded = _stereo(16000, 100)
        uc = LoadAudioUseCase(FakeAudioFetcher(), FakeAudioDecoder(decoded))

        audio = await uc.load_from_blob(b'blob', 16000)

        np.testing.assert_array_equal(audio, decoded.channels[0])
        assert not np.allclose(audio, 0.9)

    @pytest.mark.asyncio
    async def test_no_resample_when_rates_match(self):
        decoded = _stereo(16000, 320)
        uc = LoadAudioUseCase(FakeAudioFetcher(), FakeAudioDecoder(decoded))

        audio = await uc.load_from_blob(b'blob', 16000)

        assert len(audio) == 320

    @pytest.mark.asyncio
    async def test_reads_file_like_blob(self):
        decoder = FakeAudioDecoder()
        uc = LoadAudioUseCase(FakeAudioFetcher(), decoder)

        await uc.load_from_blob(io.BytesIO(b'webm-bytes'), 16000)

        assert decoder.decode_calls == [b'webm-bytes']

    @pytest.mark.asyncio
    async def test_empty_blob_raises_format_error(self):
        decoder = FakeAudioDecoder()
        uc = LoadAudioUseCase(FakeAudioFetcher(), decoder)

        with pytest.raises(AudioFormatError, match='empty'):
            await uc.load_from_blob(b'', 16000)
        assert decoder.decode_calls == []

    @pytest.mark.asyncio
    async def test_zero_channel_decode_raises_format_error(self):
        decoded = DecodedAudio(channels=np.zeros((0, 0), dtype=np.float32), sample_rate=16000)
        uc = LoadAudioUseCase(FakeAudioFetcher(), FakeAudioDecoder(decoded))

        with pytest.raises(AudioFormatError, match='no channels'):
            await uc.load_from_blob(b'x', 16000)

    @pytest.mark.asyncio
    async def test_zero_sample_rate_raises_format_error(self):
        decoded = DecodedAudio(channels=np.zeros((1, 8), dtype=np.float32), sample_rate=0)
        uc = LoadAudioUseCase(FakeAudioFetcher(), FakeAudioDecoder(decoded))

        with pytest.raises(AudioFormatError, match='invalid sample rate'):
            await uc.load_from_blob(b'x', 16000)

    @pytest.mark.asyncio
    async def test_decoder_error_propagates(self):
        class _BrokenDecoder:
            def decode(self, payload: bytes) -> DecodedAudio:
                raise AudioFormatError('Unsupported or malformed audio')

        uc = LoadAudioUseCase(FakeAudioFetcher(), _BrokenDecoder())
        with pytest.raises(AudioFormatError, match='malformed'):
            await uc.load_from_blob(b'garbage', 16000)

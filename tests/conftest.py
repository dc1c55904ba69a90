"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import threading
from pathlib import Path

import numpy as np
import pytest

from lazy_whisper.l1_entities.audio import DecodedAudio
from lazy_whisper.l1_entities.config import AppConfig, PrecisionConfig
from lazy_whisper.l1_entities.errors import AudioFetchError
from lazy_whisper.l1_entities.model_handle import ModelHandle
from lazy_whisper.l2_use_cases.load_audio_use_case import LoadAudioUseCase
from lazy_whisper.l2_use_cases.transcription_service import TranscriptionService
from lazy_whisper.l4_frameworks_and_drivers.infra_config import build_app_config

# --- Protocol-conforming Fakes ---


class FakeInferenceEngine:
    """Fake inference engine for L2 service tests.

    ``gate`` blocks load_model (in its worker thread) until set, so tests can
    observe the Loading state. ``fail_times`` makes the first N loads raise.
    """

    def __init__(
        self,
        text: str = 'hello world',
        sampling_rate: int = 16000,
        gate: threading.Event | None = None,
        fail_times: int = 0,
    ) -> None:
        self._text = text
        self._sampling_rate = sampling_rate
        self._gate = gate
        self._fail_times = fail_times
        self.load_calls: list[tuple[str, PrecisionConfig]] = []
        self.transcribe_calls: list[tuple[ModelHandle, np.ndarray]] = []
        self.released: list[ModelHandle] = []

    def load_model(self, model_name: str, precision: PrecisionConfig) -> ModelHandle:
        self.load_calls.append((model_name, precision))
        if self._gate is not None:
            self._gate.wait(timeout=5)
        if self._fail_times > 0:
            self._fail_times -= 1
            raise RuntimeError('model download failed')
        return ModelHandle(model=object(), model_name=model_name, sampling_rate=self._sampling_rate)

    def transcribe(self, handle: ModelHandle, audio: np.ndarray) -> str:
        self.transcribe_calls.append((handle, audio))
        return self._text

    def release(self, handle: ModelHandle) -> None:
        self.released.append(handle)


class FakeAudioFetcher:
    """Fake fetcher serving canned payloads by URL."""

    def __init__(self, payloads: dict[str, bytes] | None = None) -> None:
        self._payloads = dict(payloads or {})
        self.fetch_calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.fetch_calls.append(url)
        if url not in self._payloads:
            raise AudioFetchError(f'HTTP 404 fetching {url}')
        return self._payloads[url]


class FakeAudioDecoder:
    """Fake decoder returning a fixed DecodedAudio regardless of payload."""

    def __init__(self, decoded: DecodedAudio | None = None) -> None:
        self._decoded = decoded or DecodedAudio(
            channels=np.zeros((1, 16000), dtype=np.float32),
            sample_rate=16000,
        )
        self.decode_calls: list[bytes] = []

    def decode(self, payload: bytes) -> DecodedAudio:
        self.decode_calls.append(payload)
        return self._decoded


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def fake_engine() -> FakeInferenceEngine:
    return FakeInferenceEngine()


@pytest.fixture
def fake_fetcher() -> FakeAudioFetcher:
    return FakeAudioFetcher({'https://example.com/a.wav': b'RIFF-fake-bytes'})


@pytest.fixture
def fake_decoder() -> FakeAudioDecoder:
    return FakeAudioDecoder()


@pytest.fixture
def service(
    fake_engine: FakeInferenceEngine,
    fake_fetcher: FakeAudioFetcher,
    fake_decoder: FakeAudioDecoder,
) -> TranscriptionService:
    return TranscriptionService(
        engine=fake_engine,
        audio_loader=LoadAudioUseCase(fake_fetcher, fake_decoder),
    )


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
transcription:
  model: "base.en"
  precision:
    encoder: "fp32"
    decoder: "q8"
  language: "en"
audio:
  decoder: "soundfile"
  fetch_timeout: 10
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p

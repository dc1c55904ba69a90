"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from collections.abc import Callable

from lazy_whisper.l1_entities.config import AppConfig
from lazy_whisper.l2_use_cases.load_audio_use_case import LoadAudioUseCase
from lazy_whisper.l2_use_cases.ports.audio_decoder import AudioDecoder
from lazy_whisper.l2_use_cases.ports.audio_fetcher import AudioFetcher
from lazy_whisper.l2_use_cases.ports.inference_engine import InferenceEngine
from lazy_whisper.l2_use_cases.ports.model_resolver import ModelResolver
from lazy_whisper.l2_use_cases.transcription_service import TranscriptionService
from lazy_whisper.l3_interface_adapters.gateways.ffmpeg_audio_decoder import FfmpegAudioDecoder
from lazy_whisper.l3_interface_adapters.gateways.hf_model_resolver import HfModelResolver
from lazy_whisper.l3_interface_adapters.gateways.httpx_audio_fetcher import HttpxAudioFetcher
from lazy_whisper.l3_interface_adapters.gateways.soundfile_audio_decoder import SoundfileAudioDecoder
from lazy_whisper.l3_interface_adapters.gateways.whisper_cpp_engine import WhisperCppEngine


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        on_download_progress: Callable[[int], None] | None = None,
    ) -> None:
        self.config = config

        tc = config.transcription
        self.fetcher: AudioFetcher = HttpxAudioFetcher(timeout=config.audio.fetch_timeout)
        self.decoder: AudioDecoder = self._build_decoder(config.audio.decoder)
        self.model_resolver: ModelResolver = HfModelResolver(on_progress=on_download_progress)
        self.engine: InferenceEngine = WhisperCppEngine(
            self.model_resolver,
            language=tc.language,
            n_threads=tc.n_threads,
        )
        self.audio_loader = LoadAudioUseCase(self.fetcher, self.decoder)
        self.service = TranscriptionService(
            engine=self.engine,
            audio_loader=self.audio_loader,
            default_model=tc.model,
            precision=tc.precision,
        )

    @staticmethod
    def _build_decoder(name: str) -> AudioDecoder:
        if name == 'soundfile':
            return SoundfileAudioDecoder()
        return FfmpegAudioDecoder()

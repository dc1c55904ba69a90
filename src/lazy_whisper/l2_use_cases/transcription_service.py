"""Use case: transcription service — single-flight model loading and transcription."""

from __future__ import annotations

import asyncio
import logging
import time

import numpy as np

from lazy_whisper.l1_entities.config import PrecisionConfig
from lazy_whisper.l1_entities.errors import InferenceError, ModelLoadError, NotInitializedError
from lazy_whisper.l1_entities.load_state import Loaded, Loading, LoadState, Unloaded
from lazy_whisper.l1_entities.model_handle import ModelHandle
from lazy_whisper.l2_use_cases.load_audio_use_case import AudioBlob, LoadAudioUseCase
from lazy_whisper.l2_use_cases.ports.inference_engine import InferenceEngine

log = logging.getLogger('lw.service')

DEFAULT_MODEL = 'tiny.en'


class TranscriptionService:
    """Owns one lazily loaded model and transcribes URLs and blobs with it.

    Concurrent ``initialize()`` calls share a single load. A failed load
    returns the service to Unloaded so a later call can retry, possibly with
    another model name. A second name requested while a load is in flight is
    ignored: the first request wins.

    Blocking engine calls run in worker threads; every public coroutine can
    be awaited concurrently from one event loop.
    """

    def __init__(
        self,
        engine: InferenceEngine,
        audio_loader: LoadAudioUseCase,
        default_model: str = DEFAULT_MODEL,
        precision: PrecisionConfig | None = None,
    ) -> None:
        self._engine = engine
        self._audio_loader = audio_loader
        self._default_model = default_model
        self._precision = precision or PrecisionConfig()
        self._state: LoadState = Unloaded()

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def model_name(self) -> str | None:
        if isinstance(self._state, Loaded):
            return self._state.handle.model_name
        return None

    def is_ready(self) -> bool:
        return isinstance(self._state, Loaded)

    async def initialize(self, model_name: str | None = None) -> None:
        """Load *model_name* (or the default) unless a model is loaded or loading.

        Raises:
            ModelLoadError: the load failed; the service is Unloaded again.
        """
        name = model_name or self._default_model
        state = self._state

        if isinstance(state, Loaded):
            return

        if isinstance(state, Loading):
            if name != state.model_name:
                log.warning(
                    'Model %s requested while %s is loading; keeping %s',
                    name,
                    state.model_name,
                    state.model_name,
                )
            await asyncio.shield(state.task)
            return

        task = asyncio.create_task(self._load(name))
        task.add_done_callback(self._on_load_done)
        self._state = Loading(task=task, model_name=name)
        # shield: a cancelled caller must not abort the load other callers share
        await asyncio.shield(task)

    async def _load(self, model_name: str) -> None:
        log.info('Loading whisper model: %s', model_name)
        start = time.perf_counter()
        try:
            handle = await asyncio.to_thread(self._engine.load_model, model_name, self._precision)
        except asyncio.CancelledError:
            log.info('Loading of %s cancelled', model_name)
            raise
        except Exception as exc:
            if self._owns_state():
                self._state = Unloaded()
            log.error('Failed to load model %s: %s', model_name, exc)
            if isinstance(exc, ModelLoadError):
                raise
            raise ModelLoadError(f'Failed to load model {model_name!r}: {exc}') from exc

        if not self._owns_state():
            # disposed mid-load: nobody else holds this handle
            log.info('Discarding %s loaded after dispose', model_name)
            self._engine.release(handle)
            raise asyncio.CancelledError
        self._state = Loaded(handle=handle)
        log.info(
            'Whisper model loaded successfully in %.2fs (%d Hz input)',
            time.perf_counter() - start,
            handle.sampling_rate,
        )

    def _owns_state(self) -> bool:
        state = self._state
        return isinstance(state, Loading) and state.task is asyncio.current_task()

    def _on_load_done(self, task: asyncio.Task) -> None:
        state = self._state
        if task.cancelled() and isinstance(state, Loading) and state.task is task:
            # cancelled from outside, possibly before _load ever ran
            log.info('Load of %s was cancelled; back to Unloaded', state.model_name)
            self._state = Unloaded()

    def dispose(self) -> None:
        """Drop the loaded model and return to Unloaded.

        A load still in flight is orphaned rather than cancelled: its worker
        thread cannot be interrupted, so the load releases its own handle when
        the thread returns and its waiters get CancelledError.
        """
        state = self._state
        self._state = Unloaded()
        if isinstance(state, Loaded):
            log.info('Disposing model %s', state.handle.model_name)
            self._engine.release(state.handle)
        elif isinstance(state, Loading):
            log.info('Abandoning pending load of %s', state.model_name)

    async def transcribe_from_url(self, audio_url: str) -> str:
        """Fetch, decode, resample, and transcribe the audio at *audio_url*."""
        handle = self._require_handle()
        start = time.perf_counter()
        audio = await self._audio_loader.load_from_url(audio_url, handle.sampling_rate)
        return await self._infer(handle, audio, start)

    async def transcribe_from_blob(self, audio_blob: AudioBlob) -> str:
        """Decode, resample, and transcribe an in-memory recording."""
        handle = self._require_handle()
        start = time.perf_counter()
        audio = await self._audio_loader.load_from_blob(audio_blob, handle.sampling_rate)
        return await self._infer(handle, audio, start)

    def _require_handle(self) -> ModelHandle:
        state = self._state
        if not isinstance(state, Loaded):
            raise NotInitializedError('Transcriber not initialized. Call initialize() first.')
        return state.handle

    async def _infer(self, handle: ModelHandle, audio: np.ndarray, start: float) -> str:
        try:
            text = await asyncio.to_thread(self._engine.transcribe, handle, audio)
        except Exception as exc:
            raise InferenceError(f'Inference failed with model {handle.model_name!r}: {exc}') from exc
        log.info('Transcription time: %.2fs', time.perf_counter() - start)
        return text

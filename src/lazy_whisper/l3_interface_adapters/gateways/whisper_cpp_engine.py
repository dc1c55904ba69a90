"""Gateway: whisper.cpp inference engine — implements InferenceEngine port."""

from __future__ import annotations

import contextlib
import logging
import os

import numpy as np
from pywhispercpp.constants import WHISPER_SAMPLE_RATE
from pywhispercpp.model import Model

from lazy_whisper.l1_entities.config import PrecisionConfig
from lazy_whisper.l1_entities.errors import ModelLoadError
from lazy_whisper.l1_entities.model_handle import ModelHandle
from lazy_whisper.l2_use_cases.ports.model_resolver import ModelResolver

log = logging.getLogger('lw.engine')


@contextlib.contextmanager
def _suppress_c_stdout():
    """Redirect C-level stdout and stderr to /dev/null.

    whisper.cpp prints init/progress messages directly via C fprintf,
    bypassing Python's sys.stdout. This corrupts CLI output.
    """
    devnull = os.open(os.devnull, os.O_WRONLY)
    old_stdout = os.dup(1)
    old_stderr = os.dup(2)
    try:
        os.dup2(devnull, 1)
        os.dup2(devnull, 2)
        yield
    finally:
        os.dup2(old_stdout, 1)
        os.dup2(old_stderr, 2)
        os.close(devnull)
        os.close(old_stdout)
        os.close(old_stderr)


class WhisperCppEngine:
    """pywhispercpp adapter. Resolves model files, suppresses C stdout, joins segment text.

    whisper.cpp quantizes a whole ggml file, so the decoder precision picks
    which published variant to download; the encoder precision is carried on
    the request but has no separate knob here.
    """

    def __init__(
        self,
        resolver: ModelResolver,
        language: str = 'en',
        n_threads: int | None = None,
    ) -> None:
        self._resolver = resolver
        self._language = language
        self._n_threads = n_threads

    def load_model(self, model_name: str, precision: PrecisionConfig) -> ModelHandle:
        model_path = self._resolver.resolve(model_name, quantization=precision.decoder)
        log.debug('Resolved %s (decoder=%s) to %s', model_name, precision.decoder, model_path)

        params: dict = {'print_progress': False, 'print_realtime': False}
        if self._n_threads is not None:
            params['n_threads'] = self._n_threads

        try:
            with _suppress_c_stdout():
                model = Model(model_path, **params)
        except Exception as exc:
            raise ModelLoadError(f'whisper.cpp could not load {model_path}: {exc}') from exc

        return ModelHandle(model=model, model_name=model_name, sampling_rate=WHISPER_SAMPLE_RATE)

    def transcribe(self, handle: ModelHandle, audio: np.ndarray) -> str:
        if handle.model is None:
            raise RuntimeError('Model not loaded. Call load_model() first.')

        with _suppress_c_stdout():
            raw_segments = handle.model.transcribe(audio.astype(np.float32, copy=False), language=self._language)

        return ' '.join(text for seg in raw_segments if (text := seg.text.strip()))

    def release(self, handle: ModelHandle) -> None:
        """whisper.cpp frees its context when the Model is garbage collected; nothing to call here."""
        log.debug('Released %s', handle.model_name)

"""Gateway: HuggingFace model resolver — implements ModelResolver port."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from huggingface_hub import hf_hub_download
from huggingface_hub.errors import HfHubHTTPError
from pywhispercpp.constants import MODELS_DIR

from lazy_whisper.l1_entities.errors import ModelResolutionError

log = logging.getLogger('lw.resolver')

BREEZE_REPO = 'alan314159/Breeze-ASR-25-whispercpp'
BREEZE_VARIANTS = {
    'breeze': 'ggml-model.bin',
    'breeze-q8': 'ggml-model-q8_0.bin',
    'breeze-q5': 'ggml-model-q5_k.bin',
    'breeze-q4': 'ggml-model-q4_k.bin',
}

WHISPER_CPP_REPO = 'ggerganov/whisper.cpp'
WHISPER_CPP_MODELS = {
    'tiny': 'ggml-tiny.bin',
    'tiny-q5_1': 'ggml-tiny-q5_1.bin',
    'tiny-q8_0': 'ggml-tiny-q8_0.bin',
    'tiny.en': 'ggml-tiny.en.bin',
    'tiny.en-q5_1': 'ggml-tiny.en-q5_1.bin',
    'tiny.en-q8_0': 'ggml-tiny.en-q8_0.bin',
    'base': 'ggml-base.bin',
    'base-q5_1': 'ggml-base-q5_1.bin',
    'base-q8_0': 'ggml-base-q8_0.bin',
    'base.en': 'ggml-base.en.bin',
    'base.en-q5_1': 'ggml-base.en-q5_1.bin',
    'base.en-q8_0': 'ggml-base.en-q8_0.bin',
    'small': 'ggml-small.bin',
    'small-q5_1': 'ggml-small-q5_1.bin',
    'small-q8_0': 'ggml-small-q8_0.bin',
    'small.en': 'ggml-small.en.bin',
    'small.en-q5_1': 'ggml-small.en-q5_1.bin',
    'small.en-q8_0': 'ggml-small.en-q8_0.bin',
    'medium-q5_0': 'ggml-medium-q5_0.bin',
    'medium-q8_0': 'ggml-medium-q8_0.bin',
    'large-v3-turbo': 'ggml-large-v3-turbo.bin',
    'large-v3-turbo-q5_0': 'ggml-large-v3-turbo-q5_0.bin',
    'large-v3-turbo-q8_0': 'ggml-large-v3-turbo-q8_0.bin',
}

_FULL_PRECISION = {'fp32', 'fp16', 'f32', 'f16'}


def quantized_name(model_name: str, quantization: str | None) -> str:
    """Pick the published variant of *model_name* closest to *quantization*.

    ``('breeze', 'q4')`` → ``'breeze-q4'``; ``('tiny.en', 'q5')`` →
    ``'tiny.en-q5_1'``. Unknown combinations and full-precision requests
    return *model_name* unchanged.
    """
    if not quantization or quantization.lower() in _FULL_PRECISION:
        return model_name
    prefix = f'{model_name}-{quantization.lower()}'
    for table in (BREEZE_VARIANTS, WHISPER_CPP_MODELS):
        if prefix in table:
            return prefix
        for key in table:
            if key.startswith(prefix):
                return key
    return model_name


def _make_progress_class(callback: Callable[[int], None]) -> type:
    """Create a tqdm-compatible class that reports download progress via *callback*."""

    class _ProgressReporter:
        def __init__(self, *args, **kwargs):
            self.total: int = kwargs.get('total', 0) or 0
            self.n: int = 0
            if self.total > 0:
                callback(0)

        def update(self, n: int = 1) -> None:
            self.n += n
            if self.total > 0:
                callback(min(int(self.n / self.total * 100), 100))

        def close(self) -> None:
            pass

        def set_description(self, *a, **kw) -> None:
            pass

        def set_description_str(self, *a, **kw) -> None:
            pass

        def refresh(self) -> None:
            pass

        def __enter__(self):
            return self

        def __exit__(self, *args):
            self.close()

    return _ProgressReporter


class HfModelResolver:
    """Resolves whisper model names to local file paths, downloading from HF if needed."""

    def __init__(self, on_progress: Callable[[int], None] | None = None) -> None:
        self._on_progress = on_progress

    def resolve(self, model_name: str, quantization: str | None = None) -> str:
        if Path(model_name).is_absolute():
            if not Path(model_name).exists():
                raise ModelResolutionError(f'Model file not found: {model_name}')
            return model_name

        name = quantized_name(model_name, quantization)
        if name != model_name:
            log.info('Using %s variant %s', quantization, name)
        tqdm_class = _make_progress_class(self._on_progress) if self._on_progress else None

        try:
            if name in BREEZE_VARIANTS:
                return _download(BREEZE_REPO, BREEZE_VARIANTS[name], 'breeze', tqdm_class=tqdm_class)
            if name in WHISPER_CPP_MODELS:
                return _download(WHISPER_CPP_REPO, WHISPER_CPP_MODELS[name], 'whisper-cpp', tqdm_class=tqdm_class)
        except (OSError, HfHubHTTPError) as exc:
            raise ModelResolutionError(f'Failed to download model {name}: {exc}') from exc

        # pywhispercpp knows its own model names and downloads them itself
        return name


def _download(repo_id: str, filename: str, subdir: str, *, tqdm_class: type | None = None) -> str:
    cache_dir = Path(MODELS_DIR) / subdir
    cache_dir.mkdir(parents=True, exist_ok=True)
    local_path = cache_dir / filename
    if local_path.exists():
        return str(local_path)
    kwargs: dict = dict(repo_id=repo_id, filename=filename, local_dir=cache_dir)
    if tqdm_class is not None:
        kwargs['tqdm_class'] = tqdm_class
    log.info('Downloading %s from %s', filename, repo_id)
    return hf_hub_download(**kwargs)

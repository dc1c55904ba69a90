"""Port: speech-recognition inference engine."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from lazy_whisper.l1_entities.config import PrecisionConfig
from lazy_whisper.l1_entities.model_handle import ModelHandle


class InferenceEngine(Protocol):
    """Abstract inference runtime. Blocking calls; the service runs them off-loop."""

    def load_model(self, model_name: str, precision: PrecisionConfig) -> ModelHandle:
        """Fetch and load a model, reporting its expected input sampling rate."""
        ...

    def transcribe(self, handle: ModelHandle, audio: np.ndarray) -> str:
        """Run inference on mono float32 audio at ``handle.sampling_rate``."""
        ...

    def release(self, handle: ModelHandle) -> None:
        """Release any runtime resources held by *handle*."""
        ...

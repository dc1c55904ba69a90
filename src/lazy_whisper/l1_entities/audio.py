"""Decoded audio entity."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class DecodedAudio:
    """Multi-channel float PCM at the container's native rate.

    ``channels`` is shaped ``(n_channels, n_samples)``.
    """

    channels: np.ndarray
    sample_rate: int

    @property
    def num_channels(self) -> int:
        return int(self.channels.shape[0])

    @property
    def num_samples(self) -> int:
        return int(self.channels.shape[1])

    @property
    def duration(self) -> float:
        return self.num_samples / self.sample_rate

    def channel(self, index: int = 0) -> np.ndarray:
        """Return a single channel as contiguous float32."""
        return np.ascontiguousarray(self.channels[index], dtype=np.float32)

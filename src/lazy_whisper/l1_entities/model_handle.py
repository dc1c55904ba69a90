"""Loaded speech model handle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ModelHandle:
    """Opaque engine model plus the input sampling rate it expects. Never mutated after load."""

    model: Any
    model_name: str
    sampling_rate: int

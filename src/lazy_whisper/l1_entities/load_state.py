"""Model load state — Unloaded, Loading, or Loaded."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from lazy_whisper.l1_entities.model_handle import ModelHandle


@dataclass(frozen=True)
class Unloaded:
    pass


@dataclass(frozen=True)
class Loading:
    task: asyncio.Task
    model_name: str


@dataclass(frozen=True)
class Loaded:
    handle: ModelHandle


LoadState = Unloaded | Loading | Loaded

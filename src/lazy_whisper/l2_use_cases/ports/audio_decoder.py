"""Port: audio container/codec decoder."""

from __future__ import annotations

from typing import Protocol

from lazy_whisper.l1_entities.audio import DecodedAudio


class AudioDecoder(Protocol):
    def decode(self, payload: bytes) -> DecodedAudio:
        """Decode an encoded audio payload into float PCM at its native rate."""
        ...

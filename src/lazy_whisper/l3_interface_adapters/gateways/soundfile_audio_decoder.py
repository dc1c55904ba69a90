"""Gateway: libsndfile audio decoder via soundfile — WAV, FLAC, OGG/Vorbis, etc."""

from __future__ import annotations

import io

import soundfile as sf

from lazy_whisper.l1_entities.audio import DecodedAudio
from lazy_whisper.l1_entities.errors import AudioFormatError


class SoundfileAudioDecoder:
    """In-process decoder; no external binaries, but no MP3/AAC/WebM support on older libsndfile."""

    def decode(self, payload: bytes) -> DecodedAudio:
        try:
            data, rate = sf.read(io.BytesIO(payload), dtype='float32', always_2d=True)
        except (RuntimeError, TypeError, ValueError) as exc:  # LibsndfileError is a RuntimeError
            raise AudioFormatError(f'Unsupported or malformed audio: {exc}') from exc

        if data.shape[0] == 0:
            raise AudioFormatError('Audio payload appears to be empty')
        return DecodedAudio(channels=data.T, sample_rate=int(rate))

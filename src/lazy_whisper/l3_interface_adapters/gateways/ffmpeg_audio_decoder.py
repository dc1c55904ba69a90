"""Gateway: ffmpeg audio decoder — decodes any container/codec via ffprobe + ffmpeg pipes."""

from __future__ import annotations

import json
import shutil
import subprocess  # noqa: S404 -- intentional: shells out to ffmpeg with a fixed arg list, not shell=True

import numpy as np

from lazy_whisper.l1_entities.audio import DecodedAudio
from lazy_whisper.l1_entities.errors import AudioFormatError

_FFMPEG_TIMEOUT = 300  # seconds


def _require(tool: str) -> None:
    if shutil.which(tool) is None:
        raise AudioFormatError(
            f'{tool} is required but not found on PATH.\n  macOS:  brew install ffmpeg\n  Debian: apt install ffmpeg'
        )


def _run(cmd: list[str], payload: bytes) -> bytes:
    try:
        result = subprocess.run(cmd, input=payload, capture_output=True, timeout=_FFMPEG_TIMEOUT)  # noqa: S603
    except subprocess.TimeoutExpired as exc:
        raise AudioFormatError(f'{cmd[0]} timed out after {_FFMPEG_TIMEOUT}s') from exc
    except OSError as exc:
        raise AudioFormatError(f'Failed to launch {cmd[0]}: {exc}') from exc

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace').strip()
        raise AudioFormatError(f'{cmd[0]} exited with code {result.returncode}\n{stderr}')
    return result.stdout


def read_stream_info(payload: bytes) -> tuple[int, int]:
    """Return ``(sample_rate, channels)`` of the first audio stream in *payload*."""
    _require('ffprobe')
    cmd = [
        'ffprobe',
        '-v',
        'error',
        '-select_streams',
        'a:0',
        '-show_entries',
        'stream=sample_rate,channels',
        '-of',
        'json',
        'pipe:0',
    ]
    out = _run(cmd, payload)
    try:
        streams = json.loads(out or b'{}').get('streams') or []
        stream = streams[0]
        rate = int(stream['sample_rate'])
        channels = int(stream['channels'])
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise AudioFormatError('No decodable audio stream found') from exc
    if rate <= 0 or channels <= 0:
        raise AudioFormatError(f'Invalid audio stream: {rate} Hz, {channels} channel(s)')
    return rate, channels


class FfmpegAudioDecoder:
    """Decodes WAV, FLAC, MP3, M4A, OGG, WebM, etc. to float32 PCM at the native rate.

    Raises:
        AudioFormatError: ffmpeg/ffprobe missing, failed, timed out, or the
                          payload holds no decodable audio.
    """

    def decode(self, payload: bytes) -> DecodedAudio:
        rate, channels = read_stream_info(payload)

        _require('ffmpeg')
        cmd = [
            'ffmpeg',
            '-i',
            'pipe:0',
            '-map',
            '0:a:0',
            '-ar',
            str(rate),
            '-ac',
            str(channels),
            '-f',
            'f32le',
            '-v',
            'quiet',
            'pipe:1',
        ]
        out = _run(cmd, payload)
        if not out:
            raise AudioFormatError('ffmpeg produced no audio output')

        samples = np.frombuffer(out, dtype=np.float32)
        frames = len(samples) // channels
        if frames == 0:
            raise AudioFormatError('Audio payload appears to be empty')

        interleaved = samples[: frames * channels].reshape(frames, channels)
        return DecodedAudio(channels=interleaved.T, sample_rate=rate)

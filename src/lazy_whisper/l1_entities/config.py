"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt


class PrecisionConfig(BaseModel):
    """Per-submodel precision. Forwarded to the inference engine untouched."""

    encoder: str = 'fp32'
    decoder: str = 'q4'


class TranscriptionConfig(BaseModel):
    model: str
    precision: PrecisionConfig = Field(default_factory=PrecisionConfig)
    language: str
    n_threads: PositiveInt | None = None


class AudioConfig(BaseModel):
    decoder: Literal['ffmpeg', 'soundfile']
    fetch_timeout: PositiveFloat


class AppConfig(BaseModel):
    transcription: TranscriptionConfig
    audio: AudioConfig

"""Built-in configuration defaults — lives in L4, not domain."""

from __future__ import annotations

import copy

from lazy_whisper.l1_entities.config import AppConfig
from lazy_whisper.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'transcription': {
        'model': 'tiny.en',
        'precision': {'encoder': 'fp32', 'decoder': 'q4'},
        'language': 'en',
        'n_threads': None,
    },
    'audio': {
        'decoder': 'ffmpeg',
        'fetch_timeout': 30.0,
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)

"""Gateway: YAML configuration loader — implements ConfigLoader port."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import yaml

from lazy_whisper.l1_entities.config import AppConfig
from lazy_whisper.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Reads an explicit YAML file, or the first existing one in *search_paths*.

    ``load_raw`` returns the merged mapping before validation so callers can
    layer it over defaults; ``load`` validates it as a complete AppConfig.
    """

    def __init__(self, search_paths: Sequence[Path] | None = None) -> None:
        self._search_paths = list(search_paths) if search_paths is not None else list(DEFAULT_CONFIG_PATHS)

    def load(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> AppConfig:
        return AppConfig.model_validate(self.load_raw(config_path, overrides))

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            data = _read_mapping(path)
        else:
            found = next((p for p in self._search_paths if p.exists()), None)
            data = _read_mapping(found) if found is not None else {}

        if overrides:
            deep_merge(data, overrides)
        return data


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Config file must contain a mapping at top level: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base

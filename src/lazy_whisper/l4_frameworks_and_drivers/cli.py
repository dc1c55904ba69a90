"""CLI entry point for lazy-whisper."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from urllib.parse import urlparse

import click

from lazy_whisper import __version__

_URL_SCHEMES = ('http', 'https', 'file')


def _err(msg: str) -> None:
    click.echo(msg, err=True)


def _is_url(source: str) -> bool:
    return urlparse(source).scheme.lower() in _URL_SCHEMES


async def _read_blob(path: Path) -> bytes:
    from lazy_whisper.l1_entities.errors import AudioFetchError  # noqa: PLC0415 -- deferred: not loaded on --help

    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise AudioFetchError(f'Failed to read {path}: {exc}') from exc


async def _transcribe_one(service, source: str) -> str:
    if _is_url(source):
        return await service.transcribe_from_url(source)
    return await service.transcribe_from_blob(await _read_blob(Path(source)))


async def _transcribe_all(service, sources: tuple[str, ...], model: str | None) -> list[str]:
    """Initialize once, transcribe every source concurrently, dispose. Results keep input order."""
    await service.initialize(model)
    try:
        return list(await asyncio.gather(*(_transcribe_one(service, s) for s in sources)))
    finally:
        service.dispose()


@click.command()
@click.argument('sources', nargs=-1, required=True)
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.option('-m', '--model', default=None, help="Whisper model name or absolute path to a ggml file (e.g. 'base.en').")
@click.option(
    '--decoder',
    default=None,
    type=click.Choice(['ffmpeg', 'soundfile']),
    help='Audio decoder backend.',
)
@click.option('-l', '--language', default=None, help="Spoken language code (e.g. 'en').")
@click.option('-v', '--verbose', is_flag=True, help='Log progress to stderr.')
@click.option(
    '--debug-log',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Write a debug log to this file.',
)
@click.version_option(version=__version__)
def cli(sources, config_path, model, decoder, language, verbose, debug_log):
    """lazy-whisper -- transcribe audio files or URLs with a lazily loaded Whisper model.

    Each SOURCE is an http(s)/file URL or a local audio file. One transcript is
    printed per line, in the order given.
    """
    from pydantic import ValidationError  # noqa: PLC0415 -- deferred: not loaded on --help

    from lazy_whisper.l1_entities.errors import TranscriptionError  # noqa: PLC0415 -- deferred: not loaded on --help
    from lazy_whisper.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from lazy_whisper.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: whisper.cpp not loaded on --help
        DependencyContainer,
    )
    from lazy_whisper.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        build_app_config,
    )
    from lazy_whisper.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: not needed for --help
        setup_logging,
    )

    setup_logging(verbose=verbose, debug_log=debug_log)

    overrides: dict = {}
    if model:
        overrides.setdefault('transcription', {})['model'] = model
    if language:
        overrides.setdefault('transcription', {})['language'] = language
    if decoder:
        overrides['audio'] = {'decoder': decoder}

    try:
        raw = YamlConfigLoader().load_raw(config_path, overrides=overrides or None)
        config = build_app_config(raw)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        _err(f'Error: {e}')
        sys.exit(1)

    model_name = config.transcription.model

    def _on_progress(percent: int) -> None:
        _err(f'  Downloading {model_name}: {percent}%')

    container = DependencyContainer(config, on_download_progress=_on_progress)

    try:
        texts = asyncio.run(_transcribe_all(container.service, sources, model_name))
    except TranscriptionError as e:
        _err(f'Error: {e}')
        sys.exit(1)

    for text in texts:
        click.echo(text)

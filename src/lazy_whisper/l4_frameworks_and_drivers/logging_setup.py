"""Logging setup — stderr and/or debug file handlers on the ``lw`` logger."""

from __future__ import annotations

import logging
from pathlib import Path

_FORMAT = '%(asctime)s %(levelname)s %(message)s'


def setup_logging(verbose: bool = False, debug_log: Path | None = None) -> None:
    """Attach handlers to the ``lw`` root logger. Library modules only emit."""
    root = logging.getLogger('lw')
    root.setLevel(logging.DEBUG)

    if verbose:
        stream = logging.StreamHandler()
        stream.setLevel(logging.INFO)
        stream.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
        root.addHandler(stream)

    if debug_log is not None:
        debug_log.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(debug_log, encoding='utf-8')
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        logging.getLogger('lw.cli').info('Debug logging started → %s', debug_log)

    if not root.handlers:
        # keeps logging's last-resort stderr handler from echoing errors the CLI already prints
        root.addHandler(logging.NullHandler())

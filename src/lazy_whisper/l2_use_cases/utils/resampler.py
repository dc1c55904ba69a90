"""Linear-interpolation resampling between integer sample rates."""

from __future__ import annotations

import math

import numpy as np

from lazy_whisper.l1_entities.errors import InvalidArgumentError


def _check_rate(name: str, rate: int) -> None:
    if isinstance(rate, bool) or not isinstance(rate, (int, np.integer)) or rate <= 0:
        raise InvalidArgumentError(f'{name} must be a positive integer, got {rate!r}')


def resampled_length(num_samples: int, input_rate: int, output_rate: int) -> int:
    """Output length for *num_samples* converted from *input_rate* to *output_rate*.

    Ties round half up, so 2.5 samples becomes 3.
    """
    ratio = input_rate / output_rate
    return math.floor(num_samples / ratio + 0.5)


def resample(samples: np.ndarray, input_rate: int, output_rate: int) -> np.ndarray:
    """Resample mono *samples* from *input_rate* to *output_rate*.

    Output sample ``i`` sits at input position ``i * input_rate / output_rate``
    and is the linear blend of its two neighbours. Positions on or past the
    last input sample take that sample's value; nothing is extrapolated.

    Equal rates return *samples* itself, uncopied.

    Raises:
        InvalidArgumentError: either rate is not a positive integer.
    """
    _check_rate('input_rate', input_rate)
    _check_rate('output_rate', output_rate)

    if input_rate == output_rate:
        return samples

    src = np.asarray(samples, dtype=np.float32)
    n = len(src)
    new_length = resampled_length(n, input_rate, output_rate)
    if n == 0 or new_length == 0:
        return np.zeros(0, dtype=np.float32)

    ratio = input_rate / output_rate
    position = np.arange(new_length, dtype=np.float64) * ratio
    index = np.minimum(np.floor(position).astype(np.int64), n - 1)
    fraction = position - index

    left = src[index].astype(np.float64)
    has_next = index + 1 < n
    right = np.where(has_next, src[np.minimum(index + 1, n - 1)], src[index]).astype(np.float64)

    out = np.where(has_next, left * (1.0 - fraction) + right * fraction, left)
    return out.astype(np.float32)

"""Excitation source generators."""
from __future__ import annotations

from typing import Optional

import numpy as np

from .constants import DTYPE, SAMPLE_RATE
from .core import _ensure_array

__all__ = ["_voiced_source", "_white_noise", "_default_rng"]


def _default_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _voiced_source(
    numSamples: int,
    fundamental: float,
    envelope: np.ndarray,
    sr: int = SAMPLE_RATE,
) -> np.ndarray:
    """Sawtooth glottal source shaped by ``envelope``.

    The phase counts samples and wraps every ``sr / fundamental`` samples; the
    ratio within the period is mapped from [0, 1) to [-1, 1).
    """
    n = max(0, int(numSamples))
    if n == 0:
        return np.zeros(0, dtype=DTYPE)
    env = _ensure_array(envelope, dtype=np.float64)
    if env.shape[0] != n:
        raise ValueError('Envelope length must match the sample count')

    period = float(sr) / max(float(fundamental), 1.0)
    phase = np.mod(np.arange(1, n + 1, dtype=np.float64), period)
    saw = (phase / period) * 2.0 - 1.0
    return (saw * env).astype(DTYPE, copy=False)


def _white_noise(numSamples: int, rng: np.random.Generator) -> np.ndarray:
    """Uniform white noise in [-1, 1)."""
    n = max(0, int(numSamples))
    return rng.uniform(-1.0, 1.0, n)

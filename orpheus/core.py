"""Core numeric helpers shared across the synthesis modules."""
from __future__ import annotations

import numpy as np

from .constants import DTYPE, SAMPLE_RATE

__all__ = [
    "_ms_to_samples",
    "_ensure_array",
    "_normalize_peak",
    "_create_envelope",
]


def _ms_to_samples(ms: float, sr: int = SAMPLE_RATE) -> int:
    """Convert milliseconds to a number of samples (floor, min 0)."""
    if ms <= 0:
        return 0
    return int(sr * (ms / 1000.0))


def _ensure_array(x, *, dtype=DTYPE) -> np.ndarray:
    """Ensure ``x`` is a one-dimensional array of the requested dtype."""
    arr = np.asarray(x)
    if arr.dtype != dtype:
        return arr.astype(dtype, copy=False)
    return arr


def _normalize_peak(sig: np.ndarray, target: float = 1.0) -> np.ndarray:
    """Scale ``sig`` so its absolute peak equals ``target``.

    An all-zero (or empty) buffer is returned unchanged.
    """
    sig = _ensure_array(sig)
    if sig.size == 0:
        return sig
    peak = float(np.max(np.abs(sig)))
    if peak <= 0.0:
        return sig
    return (sig * (target / peak)).astype(DTYPE, copy=False)


def _create_envelope(
    numSamples: int,
    attackMs: float,
    releaseMs: float,
    sr: int = SAMPLE_RATE,
) -> np.ndarray:
    """Attack/sustain/release envelope with linear ramps.

    When the ramps do not fit, sustain collapses to zero and the release ramp
    is cut at the end of the buffer.
    """
    n = max(0, int(numSamples))
    env = np.zeros(n, dtype=np.float64)
    if n == 0:
        return env

    attack = _ms_to_samples(attackMs, sr)
    release = _ms_to_samples(releaseMs, sr)
    sustain = max(0, n - attack - release)

    if attack > 0:
        ramp = np.arange(attack, dtype=np.float64) / attack
        env[:min(attack, n)] = ramp[:n]
    env[attack:attack + sustain] = 1.0
    start = attack + sustain
    if release > 0 and start < n:
        ramp = 1.0 - np.arange(release, dtype=np.float64) / release
        env[start:] = ramp[:n - start]
    return env

"""Second-order recursive filter used by every phoneme generator."""
from __future__ import annotations

from enum import Enum
from math import cos, pi, sin

import numpy as np

from .constants import DTYPE, SAMPLE_RATE
from .core import _ensure_array

__all__ = ["FilterType", "BiquadFilter", "_biquad_process"]


_MIN_CENTER_HZ = 1.0
_MIN_Q = 0.01


class FilterType(Enum):
    BAND_PASS = 'band_pass'
    HIGH_PASS = 'high_pass'
    LOW_PASS = 'low_pass'


class BiquadFilter:
    """RBJ cookbook biquad evaluated in transposed direct form II.

    Coefficients start at zero, so an untuned filter outputs silence.
    ``recalculate`` only swaps coefficients; the delay registers survive, which
    lets a caller glide the centre frequency sample by sample.
    """

    def __init__(self, sampleRate: int = SAMPLE_RATE) -> None:
        self.sampleRate = sampleRate
        self.b0 = self.b1 = self.b2 = 0.0
        self.a1 = self.a2 = 0.0
        self.z1 = self.z2 = 0.0

    def recalculate(self, filterType: FilterType, centerFrequency: float, Q: float) -> None:
        w0 = 2.0 * pi * max(_MIN_CENTER_HZ, centerFrequency) / self.sampleRate
        alpha = sin(w0) / (2.0 * max(_MIN_Q, Q))
        cos_w0 = cos(w0)
        a0 = 1.0 + alpha

        if filterType is FilterType.BAND_PASS:
            b0, b1, b2 = alpha, 0.0, -alpha
        elif filterType is FilterType.HIGH_PASS:
            b0 = (1.0 + cos_w0) * 0.5
            b1 = -(1.0 + cos_w0)
            b2 = (1.0 + cos_w0) * 0.5
        elif filterType is FilterType.LOW_PASS:
            b0 = (1.0 - cos_w0) * 0.5
            b1 = 1.0 - cos_w0
            b2 = (1.0 - cos_w0) * 0.5
        else:
            raise ValueError(f'Unsupported filter type: {filterType!r}')

        self.b0, self.b1, self.b2 = b0 / a0, b1 / a0, b2 / a0
        self.a1 = -2.0 * cos_w0 / a0
        self.a2 = (1.0 - alpha) / a0

    def process(self, sample: float) -> float:
        """Advance the filter by one sample."""
        out = self.b0 * sample + self.z1
        self.z1 = self.b1 * sample - self.a1 * out + self.z2
        self.z2 = self.b2 * sample - self.a2 * out
        return out


def _biquad_process(x: np.ndarray, filt: BiquadFilter) -> np.ndarray:
    """Run ``x`` through ``filt`` with fixed coefficients."""
    x = _ensure_array(x, dtype=np.float64)
    y = np.empty(len(x), dtype=np.float64)
    process = filt.process
    for i, xi in enumerate(x.tolist()):
        y[i] = process(xi)
    return y.astype(DTYPE, copy=False)

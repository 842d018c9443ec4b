"""Acoustic parameters for every phoneme the transcriber can emit."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .constants import SILENCE_TOKEN

__all__ = [
    "Formants",
    "Vowel",
    "Plosive",
    "Fricative",
    "Affricate",
    "Silence",
    "Phoneme",
    "PHONEME_TABLE",
    "get_phoneme",
]

Formants = Tuple[float, float, float]


@dataclass(frozen=True)
class Vowel:
    """Formant-filtered voiced sound; diphthongs glide start -> end."""

    durationMs: float
    startFormants: Formants
    endFormants: Formants

    @classmethod
    def static(cls, durationMs: float, formants: Formants) -> "Vowel":
        return cls(durationMs, formants, formants)

    @property
    def is_diphthong(self) -> bool:
        return self.startFormants != self.endFormants


@dataclass(frozen=True)
class Plosive:
    durationMs: float
    amplitude: float
    burstFrequency: float
    burstQ: float
    voiced: bool


@dataclass(frozen=True)
class Fricative:
    durationMs: float
    amplitude: float
    noiseFreqLow: float
    noiseFreqHigh: float
    Q: float
    voiced: bool


@dataclass(frozen=True)
class Affricate:
    """Plosive + fricative pair resolved at generation time."""

    durationMs: float
    voiced: bool

    @property
    def plosive_symbol(self) -> str:
        return 'd' if self.voiced else 't'

    @property
    def fricative_symbol(self) -> str:
        return 'zh' if self.voiced else 'sh'


@dataclass(frozen=True)
class Silence:
    durationMs: float


Phoneme = Union[Vowel, Plosive, Fricative, Affricate, Silence]


# ---- hand-tuned acoustic table (adult male voice, 44.1 kHz) ----
# Sonorants (r, l, w, y, m, n) are rendered as short vowels.
PHONEME_TABLE: Mapping[str, Phoneme] = MappingProxyType({
    'iy': Vowel.static(200, (270, 2290, 3010)),
    'i_short': Vowel.static(150, (390, 1990, 2550)),
    'e_short': Vowel.static(150, (530, 1840, 2480)),
    'a_short': Vowel.static(180, (660, 1720, 2410)),
    'schwa': Vowel.static(80, (500, 1500, 2450)),
    'u_short': Vowel.static(150, (440, 1020, 2240)),
    'u_long': Vowel.static(250, (300, 870, 2240)),
    'o_short': Vowel.static(150, (570, 840, 2410)),
    'o_long': Vowel(250, (570, 840, 2410), (400, 800, 2200)),
    'aw': Vowel(250, (660, 1720, 2410), (300, 870, 2240)),
    'oy': Vowel(250, (400, 850, 2300), (390, 1990, 2550)),
    'ay': Vowel(250, (750, 1720, 2410), (390, 1990, 2550)),
    'ar': Vowel(220, (660, 1220, 2410), (490, 1350, 1690)),
    'er': Vowel.static(180, (490, 1350, 1690)),
    'r': Vowel(120, (500, 1500, 2450), (490, 1350, 1690)),
    'l': Vowel.static(100, (360, 1300, 2700)),
    'w': Vowel.static(80, (300, 600, 2240)),
    'y': Vowel.static(80, (270, 2000, 3010)),
    'm': Vowel.static(120, (300, 1100, 2300)),
    'n': Vowel.static(100, (300, 1400, 2500)),
    'h': Fricative(60, 0.2, 500, 10000, 1.0, False),
    'f': Fricative(100, 0.4, 4000, 9000, 1.5, False),
    'v': Fricative(100, 0.4, 3000, 8000, 1.5, True),
    's': Fricative(150, 0.5, 6000, 10000, 2.0, False),
    'z': Fricative(150, 0.5, 5500, 9500, 2.0, True),
    'sh': Fricative(150, 0.3, 2500, 7000, 1.2, False),
    'zh': Fricative(150, 0.3, 2000, 6000, 1.2, True),
    'th': Fricative(120, 0.2, 5000, 9000, 1.8, False),
    'b': Plosive(40, 0.8, 500, 1.0, True),
    'd': Plosive(40, 0.9, 3500, 1.5, True),
    'g': Plosive(50, 0.8, 1500, 1.2, True),
    'p': Plosive(40, 0.8, 700, 1.0, False),
    't': Plosive(40, 0.9, 4500, 1.5, False),
    'k': Plosive(50, 0.9, 1800, 1.2, False),
    'ch': Affricate(160, False),
    'j': Affricate(160, True),
    SILENCE_TOKEN: Silence(150),
})


def get_phoneme(symbol: Optional[str]) -> Optional[Phoneme]:
    """Return the table entry for ``symbol`` or ``None`` when unknown."""
    if symbol is None:
        return None
    return PHONEME_TABLE.get(symbol)

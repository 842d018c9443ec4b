"""Shared constants and lookup tables for the synthesis pipeline."""
from __future__ import annotations

import re
from typing import Dict, Tuple

import numpy as np

__all__ = [
    "DTYPE",
    "SAMPLE_RATE",
    "PEAK_DEFAULT",
    "PCM_SCALE",
    "CHUNK_SIZE",
    "SYNTHESIS_LAYERS",
    "CROSSFADE_MS",
    "AFFRICATE_CROSSFADE_MS",
    "PITCH_START_HZ",
    "PITCH_DROP_HZ",
    "SILENCE_TOKEN",
    "TRANSCRIPTION_RULES",
    "_MAX_GRAPHEME_LENGTH",
    "_WORD_SPLIT_PATTERN",
]

DTYPE = np.float32
SAMPLE_RATE = 44100
PEAK_DEFAULT = 0.9
PCM_SCALE = 32767.0
CHUNK_SIZE = 2048

# Noise layers stacked per fricative. 1-50+, higher is denser and slower.
SYNTHESIS_LAYERS = 30

CROSSFADE_MS = 6.0
AFFRICATE_CROSSFADE_MS = 2.0
PITCH_START_HZ = 110.0
PITCH_DROP_HZ = 30.0

SILENCE_TOKEN = '_'

_WORD_SPLIT_PATTERN = re.compile(r"[\s!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~]+")


# ---- grapheme -> phoneme rules ----
# One table serves the whole-word fast path and the longest-match scan, so
# word entries such as 'a' also act as fragment rules.
_RULE_SOURCE: Dict[str, str] = {
    # whole-word exceptions
    'a': 'schwa', 'is': 'i_short z', 'of': 'schwa v', 'the': 'th schwa',
    'to': 't u_long', 'and': 'a_short n d', 'in': 'i_short n', 'that': 'th a_short t',
    'it': 'i_short t', 'with': 'w i_short th', 'for': 'f o_short r', 'was': 'w schwa z',
    'on': 'o_short n', 'as': 'a_short z', 'are': 'ar', 'be': 'b iy',
    'this': 'th i_short s', 'hello': 'h e_short l o_long',
    'world': 'w er l d', 'robot': 'r o_long b o_short t',
    'java': 'j a_short v schwa', 'engine': 'e_short n j i_short n',
    'synthesizer': 's i_short n th schwa s ay z er',
    'advanced': 'schwa d v a_short n s t',
    'data': 'd ay t schwa',
    'accurate': 'a_short k y er schwa t',
    'listen': 'l i_short s schwa n',
    'difference': 'd i_short f r schwa n s',
    'between': 'b schwa t w iy n',
    'tea': 't iy',
    'two': 't u_long',
    'see': 's iy',
    'sue': 's u_long',
    'version': 'v er zh schwa n',
    'much': 'm schwa ch',
    'more': 'm o_long r',
    'test': 't e_short s t',
    # clusters
    'tion': 'sh schwa n',
    'sh': 'sh', 'ch': 'ch', 'th': 'th', 'ph': 'f',
    'qu': 'k w', 'oo': 'u_long', 'ee': 'iy',
    'ou': 'aw', 'ay': 'ay', 'ai': 'ay', 'oi': 'oy',
    # single-letter fallbacks ('a' is covered above)
    'b': 'b', 'c': 'k', 'd': 'd', 'e': 'e_short', 'f': 'f', 'g': 'g', 'h': 'h',
    'i': 'i_short', 'j': 'j', 'k': 'k', 'l': 'l', 'm': 'm', 'n': 'n', 'o': 'o_short',
    'p': 'p', 'q': 'k', 'r': 'r', 's': 's', 't': 't', 'u': 'u_short', 'v': 'v',
    'w': 'w', 'x': 'k s', 'y': 'iy', 'z': 'z',
}

TRANSCRIPTION_RULES: Dict[str, Tuple[str, ...]] = {
    grapheme: tuple(phonemes.split()) for grapheme, phonemes in _RULE_SOURCE.items()
}

_MAX_GRAPHEME_LENGTH = 4

"""Formant/articulatory text-to-speech for English."""
from __future__ import annotations

from .config import DEFAULT_SETTINGS, SynthesisSettings
from .constants import (
    CHUNK_SIZE,
    DTYPE,
    PEAK_DEFAULT,
    SAMPLE_RATE,
    SILENCE_TOKEN,
    SYNTHESIS_LAYERS,
    TRANSCRIPTION_RULES,
)
from .engine import SynthesizerEngine, pitch_contour
from .errors import ConfigurationError, OrpheusError, OutputDeviceError
from .filters import BiquadFilter, FilterType
from .io import decode_pcm16_be, encode_pcm16_be, iter_chunks, write_wav
from .phonemes import (
    PHONEME_TABLE,
    Affricate,
    Fricative,
    Phoneme,
    Plosive,
    Silence,
    Vowel,
    get_phoneme,
)
from .sinks import AudioSink, CollectingSink, TeeSink, WavFileSink
from .synthesis import (
    stitch_clips,
    synth_affricate,
    synth_fricative,
    synth_phoneme,
    synth_plosive,
    synth_silence,
    synth_vowel,
)
from .text import PhoneticTranscriber, split_words, text_to_phonemes, transcribe
from .worker import SpeechWorker

__all__ = [
    "CHUNK_SIZE",
    "DTYPE",
    "PEAK_DEFAULT",
    "SAMPLE_RATE",
    "SILENCE_TOKEN",
    "SYNTHESIS_LAYERS",
    "TRANSCRIPTION_RULES",
    "DEFAULT_SETTINGS",
    "SynthesisSettings",
    "OrpheusError",
    "ConfigurationError",
    "OutputDeviceError",
    "BiquadFilter",
    "FilterType",
    "PHONEME_TABLE",
    "Phoneme",
    "Vowel",
    "Plosive",
    "Fricative",
    "Affricate",
    "Silence",
    "get_phoneme",
    "PhoneticTranscriber",
    "transcribe",
    "split_words",
    "text_to_phonemes",
    "synth_vowel",
    "synth_fricative",
    "synth_plosive",
    "synth_affricate",
    "synth_silence",
    "synth_phoneme",
    "stitch_clips",
    "encode_pcm16_be",
    "decode_pcm16_be",
    "iter_chunks",
    "write_wav",
    "AudioSink",
    "CollectingSink",
    "TeeSink",
    "WavFileSink",
    "SynthesizerEngine",
    "pitch_contour",
    "SpeechWorker",
]

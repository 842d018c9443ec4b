"""Per-phoneme waveform generators and clip stitching."""
from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .constants import (
    AFFRICATE_CROSSFADE_MS,
    CROSSFADE_MS,
    DTYPE,
    SAMPLE_RATE,
    SYNTHESIS_LAYERS,
)
from .core import _create_envelope, _ensure_array, _ms_to_samples, _normalize_peak
from .filters import BiquadFilter, FilterType, _biquad_process
from .phonemes import (
    PHONEME_TABLE,
    Affricate,
    Fricative,
    Phoneme,
    Plosive,
    Silence,
    Vowel,
)
from .sources import _default_rng, _voiced_source, _white_noise

__all__ = [
    "synth_vowel",
    "synth_fricative",
    "synth_plosive",
    "synth_affricate",
    "synth_silence",
    "synth_phoneme",
    "stitch_clips",
]


_VOWEL_ATTACK_MS = 5.0
_VOWEL_RELEASE_MS = 10.0
_FORMANT_Q = 10.0

_FRICATIVE_ATTACK_MS = 2.0
_FRICATIVE_RELEASE_MS = 50.0
_LAYER_FREQ_JITTER = 0.2
_LAYER_Q_JITTER = 0.3
_LAYER_GAIN_FALLOFF = 1.5
_FRICATIVE_NOISE_MIX = 0.7
_FRICATIVE_VOICE_MIX = 0.3

_BURST_MS = 15.0
_CLICK_MIX = 0.6
_ASPIRATION_MIX = 0.4
_MURMUR_LEAD_MS = 10.0
_MURMUR_ATTACK_MS = 1.0
_MURMUR_RELEASE_MS = 5.0
_MURMUR_CUTOFF_HZ = 400.0
_MURMUR_Q = 0.707
_MURMUR_GAIN = 0.8


def synth_vowel(
    phoneme: Vowel,
    numSamples: int,
    fundamental: float,
    sampleRate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Voiced source through a cascade of three formant band-passes.

    Each formant's centre frequency moves linearly from its start to its end
    value over the phoneme, which produces the diphthong glide.
    """
    n = max(0, int(numSamples))
    if n == 0:
        return np.zeros(0, dtype=DTYPE)

    envelope = _create_envelope(n, _VOWEL_ATTACK_MS, _VOWEL_RELEASE_MS, sampleRate)
    src = _voiced_source(n, fundamental, envelope, sampleRate).tolist()

    start = phoneme.startFormants
    end = phoneme.endFormants
    filters = [BiquadFilter(sampleRate) for _ in start]
    gliding = phoneme.is_diphthong
    if not gliding:
        for filt, freq in zip(filters, start):
            filt.recalculate(FilterType.BAND_PASS, freq, _FORMANT_Q)

    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        sample = src[i]
        if gliding:
            r = i / n
            for filt, f_start, f_end in zip(filters, start, end):
                filt.recalculate(FilterType.BAND_PASS, f_start + (f_end - f_start) * r, _FORMANT_Q)
                sample = filt.process(sample)
        else:
            for filt in filters:
                sample = filt.process(sample)
        out[i] = sample
    return _normalize_peak(out.astype(DTYPE), 1.0)


def synth_fricative(
    phoneme: Fricative,
    numSamples: int,
    fundamental: float,
    *,
    layers: int = SYNTHESIS_LAYERS,
    rng: Optional[np.random.Generator] = None,
    sampleRate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Layered band-passed noise, optionally blended with a voiced source.

    Layer 0 sits exactly on the phoneme's noise band; later layers drift
    further in frequency and Q and fall off as ``1 / (1.5 * layer)``.
    """
    n = max(0, int(numSamples))
    if n == 0:
        return np.zeros(0, dtype=DTYPE)
    rng = _default_rng(rng)

    envelope = _create_envelope(n, _FRICATIVE_ATTACK_MS, _FRICATIVE_RELEASE_MS, sampleRate)
    mixed = np.zeros(n, dtype=np.float64)
    for layer in range(max(1, int(layers))):
        center = phoneme.noiseFreqLow * (1.0 + (rng.random() - 0.5) * _LAYER_FREQ_JITTER * layer)
        layer_q = phoneme.Q * (1.0 + (rng.random() - 0.5) * _LAYER_Q_JITTER * layer)
        filt = BiquadFilter(sampleRate)
        filt.recalculate(FilterType.BAND_PASS, center, layer_q)
        noise = _biquad_process(_white_noise(n, rng), filt) * envelope
        gain = 1.0 if layer == 0 else 1.0 / (layer * _LAYER_GAIN_FALLOFF)
        mixed += _normalize_peak(noise, gain)
    out = _normalize_peak(mixed.astype(DTYPE), phoneme.amplitude)

    if phoneme.voiced:
        voiced = _voiced_source(n, fundamental, envelope, sampleRate)
        out = (out * _FRICATIVE_NOISE_MIX + voiced * _FRICATIVE_VOICE_MIX).astype(DTYPE)
    return out


def _aspiration(
    nextPhoneme: Optional[Phoneme],
    numSamples: int,
    rng: np.random.Generator,
    sampleRate: int,
) -> np.ndarray:
    """Noise shaped by the following vowel's onset formants, in parallel."""
    if numSamples <= 0 or not isinstance(nextPhoneme, Vowel):
        return np.zeros(max(0, numSamples), dtype=DTYPE)

    filters = []
    for formant in nextPhoneme.startFormants:
        filt = BiquadFilter(sampleRate)
        filt.recalculate(FilterType.BAND_PASS, formant, _FORMANT_Q)
        filters.append(filt)

    noise = _white_noise(numSamples, rng)
    total = sum(_biquad_process(noise, filt).astype(np.float64) for filt in filters)
    return _normalize_peak((total / len(filters)).astype(DTYPE), 1.0)


def synth_plosive(
    phoneme: Plosive,
    numSamples: int,
    fundamental: float,
    nextPhoneme: Optional[Phoneme] = None,
    *,
    rng: Optional[np.random.Generator] = None,
    sampleRate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Stop closure, decaying burst and (if voiced) a low-passed murmur.

    The first third is silent. The burst mixes a band-passed click with
    aspiration coloured by the next vowel, under a squared decay.
    """
    n = max(0, int(numSamples))
    out = np.zeros(n, dtype=np.float64)
    if n == 0:
        return out.astype(DTYPE)
    rng = _default_rng(rng)

    stop = n // 3
    burst = min(_ms_to_samples(_BURST_MS, sampleRate), n - stop)

    if burst > 0:
        click_filter = BiquadFilter(sampleRate)
        click_filter.recalculate(FilterType.BAND_PASS, phoneme.burstFrequency, phoneme.burstQ)
        click = _normalize_peak(_biquad_process(_white_noise(burst, rng), click_filter), 1.0)
        aspiration = _aspiration(nextPhoneme, burst, rng, sampleRate)

        decay = (1.0 - np.arange(burst, dtype=np.float64) / burst) ** 2
        mixed = click * _CLICK_MIX + aspiration * _ASPIRATION_MIX
        out[stop:stop + burst] = mixed * phoneme.amplitude * decay

    if phoneme.voiced:
        voiced_start = max(0, stop - _ms_to_samples(_MURMUR_LEAD_MS, sampleRate))
        length = n - voiced_start
        envelope = _create_envelope(length, _MURMUR_ATTACK_MS, _MURMUR_RELEASE_MS, sampleRate)
        raw = _voiced_source(length, fundamental, envelope, sampleRate)
        low_pass = BiquadFilter(sampleRate)
        low_pass.recalculate(FilterType.LOW_PASS, _MURMUR_CUTOFF_HZ, _MURMUR_Q)
        murmur = _normalize_peak(_biquad_process(raw, low_pass), 1.0)
        out[voiced_start:] += murmur * _MURMUR_GAIN * phoneme.amplitude

    return out.astype(DTYPE)


def synth_affricate(
    phoneme: Affricate,
    fundamental: float,
    *,
    layers: int = SYNTHESIS_LAYERS,
    rng: Optional[np.random.Generator] = None,
    sampleRate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Stop + fricative pair ('t'+'sh' or 'd'+'zh') joined by a short cross-fade.

    The length comes from the two parts, not from ``phoneme.durationMs``.
    """
    rng = _default_rng(rng)
    plosive = PHONEME_TABLE[phoneme.plosive_symbol]
    fricative = PHONEME_TABLE[phoneme.fricative_symbol]
    closure = synth_phoneme(
        plosive, fundamental, fricative, layers=layers, rng=rng, sampleRate=sampleRate
    )
    release = synth_phoneme(
        fricative, fundamental, None, layers=layers, rng=rng, sampleRate=sampleRate
    )
    return stitch_clips([closure, release], AFFRICATE_CROSSFADE_MS, sampleRate)


def synth_silence(numSamples: int) -> np.ndarray:
    return np.zeros(max(0, int(numSamples)), dtype=DTYPE)


def synth_phoneme(
    phoneme: Phoneme,
    fundamental: float,
    nextPhoneme: Optional[Phoneme] = None,
    *,
    layers: int = SYNTHESIS_LAYERS,
    rng: Optional[np.random.Generator] = None,
    sampleRate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Render ``phoneme`` at ``fundamental`` Hz.

    Args:
        phoneme: Table entry to render.
        fundamental: Pitch of any voiced component in Hz.
        nextPhoneme: Following table entry, used for plosive aspiration.
        layers: Noise layers per fricative.
        rng: Noise source; a fresh generator is used when omitted.
        sampleRate: Output sample rate.

    Returns:
        np.ndarray: Mono float32 samples.
    """
    if not isinstance(phoneme, (Vowel, Fricative, Plosive, Affricate, Silence)):
        raise TypeError(f'Unknown phoneme variant: {type(phoneme).__name__}')

    n = _ms_to_samples(phoneme.durationMs, sampleRate)
    if isinstance(phoneme, Vowel):
        return synth_vowel(phoneme, n, fundamental, sampleRate)
    if isinstance(phoneme, Fricative):
        return synth_fricative(
            phoneme, n, fundamental, layers=layers, rng=rng, sampleRate=sampleRate
        )
    if isinstance(phoneme, Plosive):
        return synth_plosive(
            phoneme, n, fundamental, nextPhoneme, rng=rng, sampleRate=sampleRate
        )
    if isinstance(phoneme, Affricate):
        return synth_affricate(phoneme, fundamental, layers=layers, rng=rng, sampleRate=sampleRate)
    return synth_silence(n)


def stitch_clips(
    clips: Sequence[np.ndarray],
    overlapMs: float = CROSSFADE_MS,
    sampleRate: int = SAMPLE_RATE,
    *,
    overlapSamples: Optional[int] = None,
) -> np.ndarray:
    """Join clips end to end with a linear cross-fade at every boundary.

    The tail already written is faded out while the head of the next clip
    fades in over the same samples, so each join shortens the output by the
    overlap instead of duplicating it.
    """
    overlap = _ms_to_samples(overlapMs, sampleRate) if overlapSamples is None else max(0, int(overlapSamples))
    parts: List[np.ndarray] = [_ensure_array(clip) for clip in clips]
    if not parts:
        return np.zeros(0, dtype=DTYPE)

    out = np.zeros(sum(len(clip) for clip in parts), dtype=np.float64)
    pos = 0
    for clip in parts:
        blend_start = max(0, pos - overlap)
        blended = pos - blend_start
        k = min(blended, len(clip))
        if k > 0:
            ratio = np.arange(k, dtype=np.float64) / overlap
            region = out[blend_start:blend_start + k]
            out[blend_start:blend_start + k] = region * (1.0 - ratio) + clip[:k] * ratio
        remaining = len(clip) - blended
        if remaining > 0:
            out[pos:pos + remaining] = clip[blended:]
            pos += remaining
    return out[:pos].astype(DTYPE)

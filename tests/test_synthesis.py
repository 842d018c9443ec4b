"""Tests for the per-phoneme generators and clip stitching."""
import numpy as np
import pytest

from orpheus import (
    PHONEME_TABLE,
    Affricate,
    BiquadFilter,
    FilterType,
    Fricative,
    Plosive,
    Silence,
    Vowel,
    stitch_clips,
    synth_affricate,
    synth_fricative,
    synth_phoneme,
    synth_plosive,
    synth_vowel,
)
from orpheus import synthesis
from orpheus.core import _ms_to_samples
from orpheus.sources import _voiced_source


def test_voiced_source_is_sawtooth():
    env = np.ones(10)
    out = _voiced_source(10, 1000.0, env, sr=4000)  # period of 4 samples
    expected = np.array([-0.5, 0.0, 0.5, -1.0] * 3)[:10]
    np.testing.assert_allclose(out, expected, atol=1e-6)


def test_voiced_source_follows_envelope():
    env = np.linspace(0.0, 1.0, 100)
    out = _voiced_source(100, 110.0, env)
    assert out[0] == 0.0
    assert np.all(np.abs(out) <= env + 1e-6)


def test_voiced_source_rejects_mismatched_envelope():
    with pytest.raises(ValueError):
        _voiced_source(10, 110.0, np.ones(5))


def test_vowel_is_normalised_to_unity():
    vowel = PHONEME_TABLE["a_short"]
    n = _ms_to_samples(vowel.durationMs)
    out = synth_vowel(vowel, n, 100)
    assert out.shape == (n,)
    assert out.dtype == np.float32
    assert np.max(np.abs(out)) == pytest.approx(1.0, rel=1e-6)


def test_diphthong_differs_from_static_onset():
    glide = PHONEME_TABLE["ay"]
    static = Vowel.static(glide.durationMs, glide.startFormants)
    n = _ms_to_samples(glide.durationMs)
    a = synth_vowel(glide, n, 100)
    b = synth_vowel(static, n, 100)
    assert not np.allclose(a[-2000:], b[-2000:], atol=0.05)


def test_unvoiced_fricative_peaks_at_amplitude(rng):
    s = PHONEME_TABLE["s"]
    n = _ms_to_samples(s.durationMs)
    out = synth_fricative(s, n, 100, layers=4, rng=rng)
    assert out.shape == (n,)
    assert np.max(np.abs(out)) == pytest.approx(s.amplitude, rel=1e-5)
    # 2 ms attack starts from silence
    assert out[0] == 0.0


def test_voiced_fricative_blends_source(rng):
    z = PHONEME_TABLE["z"]
    n = _ms_to_samples(z.durationMs)
    out = synth_fricative(z, n, 100, layers=4, rng=rng)
    assert np.max(np.abs(out)) <= 0.7 * z.amplitude + 0.3 + 1e-6


def test_fricative_is_reproducible_with_seed():
    f = PHONEME_TABLE["f"]
    a = synth_fricative(f, 2000, 100, layers=5, rng=np.random.default_rng(7))
    b = synth_fricative(f, 2000, 100, layers=5, rng=np.random.default_rng(7))
    np.testing.assert_array_equal(a, b)


def test_fricative_layers_jitter_and_fall_off(monkeypatch, rng):
    tuned = []
    gains = []
    original_recalculate = BiquadFilter.recalculate
    original_normalize = synthesis._normalize_peak

    def recording_recalculate(self, filterType, centerFrequency, Q):
        tuned.append((filterType, centerFrequency, Q))
        original_recalculate(self, filterType, centerFrequency, Q)

    def recording_normalize(sig, target=1.0):
        gains.append(target)
        return original_normalize(sig, target)

    monkeypatch.setattr(BiquadFilter, "recalculate", recording_recalculate)
    monkeypatch.setattr(synthesis, "_normalize_peak", recording_normalize)

    s = PHONEME_TABLE["s"]
    synth_fricative(s, 2000, 100, layers=4, rng=rng)

    assert len(tuned) == 4
    # layer 0 sits exactly on the table values
    assert tuned[0] == (FilterType.BAND_PASS, s.noiseFreqLow, s.Q)
    for layer, (kind, center, q) in enumerate(tuned[1:], start=1):
        assert kind is FilterType.BAND_PASS
        assert abs(center / s.noiseFreqLow - 1.0) <= 0.1 * layer
        assert abs(q / s.Q - 1.0) <= 0.15 * layer
    assert any(center != s.noiseFreqLow for _, center, _ in tuned[1:])
    assert gains == pytest.approx([1.0, 1 / 1.5, 1 / 3.0, 1 / 4.5, s.amplitude])


def test_fricative_with_many_layers_stays_finite(rng):
    sh = PHONEME_TABLE["sh"]
    out = synth_fricative(sh, 1000, 100, layers=50, rng=rng)
    assert np.all(np.isfinite(out))


def test_unvoiced_plosive_structure(rng):
    t = PHONEME_TABLE["t"]
    n = _ms_to_samples(t.durationMs)
    out = synth_plosive(t, n, 100, PHONEME_TABLE["a_short"], rng=rng)
    stop = n // 3
    burst = _ms_to_samples(15)
    assert out.shape == (n,)
    assert np.all(out[:stop] == 0.0)
    assert np.any(out[stop:stop + burst] != 0.0)
    assert np.all(out[stop + burst:] == 0.0)
    assert np.max(np.abs(out)) <= t.amplitude + 1e-6


def test_plosive_without_following_vowel_has_no_aspiration(rng):
    p = PHONEME_TABLE["p"]
    n = _ms_to_samples(p.durationMs)
    out = synth_plosive(p, n, 100, PHONEME_TABLE["s"], rng=rng)
    # click only: 0.6 * amplitude at most
    assert np.max(np.abs(out)) <= 0.6 * p.amplitude + 1e-6


def test_voiced_plosive_murmur_leads_burst(rng):
    b = PHONEME_TABLE["b"]
    n = _ms_to_samples(b.durationMs)
    out = synth_plosive(b, n, 100, None, rng=rng)
    voiced_start = n // 3 - _ms_to_samples(10)
    assert np.all(out[:voiced_start] == 0.0)
    assert np.any(out[voiced_start:n // 3] != 0.0)


def test_plosive_shorter_than_burst(rng):
    tiny = Plosive(durationMs=3, amplitude=0.9, burstFrequency=4500, burstQ=1.5, voiced=True)
    n = _ms_to_samples(tiny.durationMs)
    out = synth_plosive(tiny, n, 100, None, rng=rng)
    assert out.shape == (n,)
    assert np.all(np.isfinite(out))


def test_affricate_joins_plosive_and_fricative(rng):
    ch = PHONEME_TABLE["ch"]
    out = synth_affricate(ch, 100, layers=2, rng=rng)
    expected = (
        _ms_to_samples(PHONEME_TABLE["t"].durationMs)
        + _ms_to_samples(PHONEME_TABLE["sh"].durationMs)
        - _ms_to_samples(2)
    )
    assert out.shape == (expected,)


def test_affricate_picks_voiced_pair():
    assert (Affricate(160, True).plosive_symbol, Affricate(160, True).fricative_symbol) == ("d", "zh")
    assert (Affricate(160, False).plosive_symbol, Affricate(160, False).fricative_symbol) == ("t", "sh")


def test_silence_is_zero_filled():
    out = synth_phoneme(PHONEME_TABLE["_"], 100)
    assert out.shape == (_ms_to_samples(150),)
    assert not np.any(out)


def test_synth_phoneme_dispatches_every_table_entry(rng):
    for symbol, phoneme in PHONEME_TABLE.items():
        out = synth_phoneme(phoneme, 100, PHONEME_TABLE["iy"], layers=1, rng=rng)
        assert out.ndim == 1 and out.size > 0, symbol
        assert np.all(np.isfinite(out)), symbol


def test_synth_phoneme_rejects_unknown_variant():
    with pytest.raises(TypeError):
        synth_phoneme(object(), 100)


def test_zero_duration_phonemes_render_empty(rng):
    assert synth_phoneme(Vowel.static(0, (500, 1500, 2500)), 100).size == 0
    assert synth_phoneme(Fricative(0, 0.5, 6000, 10000, 2.0, True), 100, rng=rng).size == 0
    assert synth_phoneme(Silence(0), 100).size == 0


def test_stitch_crossfades_boundary():
    a = np.ones(100, dtype=np.float32)
    b = np.full(100, 2.0, dtype=np.float32)
    out = stitch_clips([a, b], overlapSamples=10)
    assert out.shape == (190,)
    ratio = np.arange(10) / 10
    np.testing.assert_allclose(out[90:100], 1.0 * (1 - ratio) + 2.0 * ratio, rtol=1e-6)
    assert np.all(out[:90] == 1.0)
    assert np.all(out[100:] == 2.0)


def test_stitch_length_accounts_for_every_boundary():
    clips = [np.ones(50), np.ones(60), np.ones(70)]
    assert stitch_clips(clips, overlapSamples=5).shape == (170,)
    assert stitch_clips(clips, overlapSamples=0).shape == (180,)


def test_stitch_uses_milliseconds_by_default():
    clips = [np.ones(1000), np.ones(1000)]
    assert stitch_clips(clips).shape == (2000 - _ms_to_samples(6),)


def test_stitch_handles_empty_and_short_clips():
    assert stitch_clips([]).size == 0
    out = stitch_clips([np.ones(3), np.ones(100)], overlapSamples=10)
    assert out.shape == (100,)
    out = stitch_clips([np.ones(100), np.ones(4), np.ones(20)], overlapSamples=10)
    assert out.shape == (110,)

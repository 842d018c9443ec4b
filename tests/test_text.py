"""Tests for the grapheme-to-phoneme transcriber."""
import pytest

from orpheus import (
    PHONEME_TABLE,
    SILENCE_TOKEN,
    TRANSCRIPTION_RULES,
    PhoneticTranscriber,
    split_words,
    text_to_phonemes,
    transcribe,
)


def test_dictionary_words_bypass_scan():
    assert transcribe("the") == ["th", "schwa"]
    assert transcribe("is") == ["i_short", "z"]
    assert transcribe("hello") == ["h", "e_short", "l", "o_long"]


def test_input_is_lowercased():
    assert transcribe("THE") == transcribe("the")
    assert transcribe("Ship") == ["sh", "i_short", "p"]


def test_longest_match_prefers_four_letter_cluster():
    # "tion" beats "t" + "i" + "o" + "n"
    assert transcribe("nation") == ["n", "schwa", "sh", "schwa", "n"]


def test_digraphs_and_fallbacks():
    assert transcribe("queen") == ["k", "w", "iy", "n"]
    assert transcribe("phone") == ["f", "o_short", "n", "e_short"]


def test_unmapped_characters_are_skipped():
    assert transcribe("x1y") == ["k", "s", "iy"]
    assert transcribe("123") == []
    assert transcribe("") == []


def test_transcription_is_deterministic():
    words = ["synthesize", "quickly", "phonetics", "zzz"]
    assert [transcribe(w) for w in words] == [transcribe(w) for w in words]


def test_synthetic_table_longest_match():
    transcriber = PhoneticTranscriber({"ab": ["X"], "a": ["Y"], "b": ["Z"]})
    assert transcriber.transcribe("ab") == ["X"]
    assert transcriber.transcribe("aab") == ["Y", "X"]


def test_synthetic_table_whole_word_wins():
    transcriber = PhoneticTranscriber({"abc": ["W"], "ab": ["X"], "c": ["Z"]})
    assert transcriber.transcribe("abc") == ["W"]
    # whole-word keys also serve as fragments during the scan
    assert transcriber.transcribe("abcc") == ["W", "Z"]


@pytest.mark.parametrize(
    "vowel, lengthened",
    [("a", "ay"), ("i", "ay"), ("o", "o_long")],
)
def test_silent_e_lengthens_vowel(vowel, lengthened):
    rules = {
        "h": ["h"], "t": ["t"], "e": [],
        "a": ["a_short"], "i": ["i_short"], "o": ["o_short"],
    }
    transcriber = PhoneticTranscriber(rules)
    assert transcriber.transcribe(f"h{vowel}te") == ["h", lengthened, "t"]


def test_silent_e_leaves_other_vowels():
    transcriber = PhoneticTranscriber({"h": ["h"], "u": ["u_short"], "t": ["t"], "e": []})
    assert transcriber.transcribe("hute") == ["h", "u_short", "t"]


def test_double_e_does_not_trigger_silent_e():
    transcriber = PhoneticTranscriber({"h": ["h"], "a": ["a_short"], "t": ["t"], "ee": []})
    assert transcriber.transcribe("hatee") == ["h", "a_short", "t"]


def test_silent_e_needs_two_phonemes():
    transcriber = PhoneticTranscriber({"a": ["a_short"], "e": []})
    assert transcriber.transcribe("ae") == ["a_short"]


def test_every_letter_has_a_rule():
    for letter in "abcdefghijklmnopqrstuvwxyz":
        assert letter in TRANSCRIPTION_RULES


def test_every_emitted_phoneme_exists_in_table():
    for phonemes in TRANSCRIPTION_RULES.values():
        for symbol in phonemes:
            assert symbol in PHONEME_TABLE, symbol


def test_split_words_drops_punctuation():
    assert split_words("Hello, world!  It's  me.") == ["hello", "world", "it", "s", "me"]
    assert split_words("   ") == []


def test_text_to_phonemes_closes_each_word_with_silence():
    phonemes = text_to_phonemes("The test.")
    assert phonemes == ["th", "schwa", SILENCE_TOKEN, "t", "e_short", "s", "t", SILENCE_TOKEN]


def test_text_to_phonemes_empty_input():
    assert text_to_phonemes("") == []
    assert text_to_phonemes(" \t\n ") == []

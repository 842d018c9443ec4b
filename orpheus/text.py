"""English text to phoneme transcription helpers."""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from .constants import (
    SILENCE_TOKEN,
    TRANSCRIPTION_RULES,
    _MAX_GRAPHEME_LENGTH,
    _WORD_SPLIT_PATTERN,
)

__all__ = ["PhoneticTranscriber", "split_words", "transcribe", "text_to_phonemes"]

# phoneme before the final consonant -> lengthened form ("hat" -> "hate")
_SILENT_E_LENGTHENING = {
    'a_short': 'ay',
    'i_short': 'ay',
    'o_short': 'o_long',
}


class PhoneticTranscriber:
    """Greedy grapheme-to-phoneme transcriber.

    Whole-word entries win outright. Otherwise the word is scanned left to
    right taking the longest rule (up to four letters) at each position and
    skipping characters no rule covers. A trailing silent ``e`` lengthens the
    vowel before the final consonant.
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, Sequence[str]]] = None,
        *,
        maxGraphemeLength: int = _MAX_GRAPHEME_LENGTH,
    ) -> None:
        source = TRANSCRIPTION_RULES if rules is None else rules
        self._rules = {key.lower(): tuple(value) for key, value in source.items()}
        self._max_len = max(1, int(maxGraphemeLength))

    def transcribe(self, word: str) -> List[str]:
        word = word.lower()
        if not word:
            return []

        exact = self._rules.get(word)
        if exact is not None:
            return list(exact)

        phonemes: List[str] = []
        i, n = 0, len(word)
        while i < n:
            for size in range(min(self._max_len, n - i), 0, -1):
                rule = self._rules.get(word[i:i + size])
                if rule is not None:
                    phonemes.extend(rule)
                    i += size
                    break
            else:
                i += 1

        if word.endswith('e') and not word.endswith('ee') and len(phonemes) > 1:
            lengthened = _SILENT_E_LENGTHENING.get(phonemes[-2])
            if lengthened is not None:
                phonemes[-2] = lengthened
        return phonemes


_DEFAULT_TRANSCRIBER = PhoneticTranscriber()


def split_words(text: str) -> List[str]:
    """Split ``text`` on whitespace and punctuation, dropping empty words."""
    if not text:
        return []
    return [word for word in _WORD_SPLIT_PATTERN.split(text.lower().strip()) if word]


def transcribe(word: str) -> List[str]:
    """Transcribe a single word with the built-in rule table."""
    return _DEFAULT_TRANSCRIBER.transcribe(word)


def text_to_phonemes(
    text: str,
    transcriber: Optional[PhoneticTranscriber] = None,
) -> List[str]:
    """Transcribe every word of ``text``, closing each with a silence token."""
    transcriber = transcriber or _DEFAULT_TRANSCRIBER
    phonemes: List[str] = []
    for word in split_words(text):
        phonemes.extend(transcriber.transcribe(word))
        phonemes.append(SILENCE_TOKEN)
    return phonemes

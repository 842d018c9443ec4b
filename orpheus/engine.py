"""Text-to-speech orchestration: phonemes in, PCM chunks out."""
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .config import DEFAULT_SETTINGS, SynthesisSettings
from .constants import DTYPE
from .core import _normalize_peak
from .errors import OutputDeviceError
from .io import encode_pcm16_be, iter_chunks
from .phonemes import get_phoneme
from .sinks import AudioSink, ChunkCallback
from .synthesis import stitch_clips, synth_phoneme
from .text import PhoneticTranscriber, text_to_phonemes

__all__ = ["SynthesizerEngine", "pitch_contour"]

logger = logging.getLogger(__name__)


def pitch_contour(index: int, total: int, startHz: float, dropHz: float) -> int:
    """Declarative fall: ``startHz`` at the first phoneme, ``startHz - dropHz`` by the last."""
    ratio = min(1.0, index / max(1, total - 2))
    return int(startHz - dropHz * ratio)


class SynthesizerEngine:
    """Turns text into 16-bit big-endian PCM delivered in fixed-size chunks.

    Each call allocates its own filters, buffers and noise generator, so the
    engine can run on any worker thread. Calls sharing one sink must still be
    serialised by the caller (see :class:`orpheus.worker.SpeechWorker`).
    """

    def __init__(
        self,
        sink: Optional[AudioSink] = None,
        onChunk: Optional[ChunkCallback] = None,
        *,
        settings: Optional[SynthesisSettings] = None,
        transcriber: Optional[PhoneticTranscriber] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.sink = sink
        self.onChunk = onChunk
        self.settings = settings or DEFAULT_SETTINGS
        self.transcriber = transcriber or PhoneticTranscriber()
        self.seed = seed

    def phonemes(self, text: str) -> List[str]:
        return text_to_phonemes(text, self.transcriber)

    def render_phonemes(self, symbols: List[str]) -> np.ndarray:
        """Generate, stitch and normalise the waveform for ``symbols``."""
        settings = self.settings
        rng = np.random.default_rng(self.seed)
        total = len(symbols)
        clips: List[np.ndarray] = []
        for index, symbol in enumerate(symbols):
            phoneme = get_phoneme(symbol)
            if phoneme is None:
                logger.debug("Skipping unknown phoneme %r", symbol)
                continue
            fundamental = pitch_contour(index, total, settings.pitch_start_hz, settings.pitch_drop_hz)
            following = get_phoneme(symbols[index + 1]) if index + 1 < total else None
            clips.append(
                synth_phoneme(
                    phoneme,
                    fundamental,
                    following,
                    layers=settings.synthesis_layers,
                    rng=rng,
                    sampleRate=settings.sample_rate,
                )
            )

        audio = stitch_clips(clips, settings.crossfade_ms, settings.sample_rate)
        return _normalize_peak(audio, settings.master_volume)

    def render(self, text: str) -> np.ndarray:
        symbols = self.phonemes(text)
        if not symbols:
            return np.zeros(0, dtype=DTYPE)
        return self.render_phonemes(symbols)

    def encode(self, text: str) -> bytes:
        return encode_pcm16_be(self.render(text))

    def speak(self, text: str, sink: Optional[AudioSink] = None) -> int:
        """Synthesise ``text`` and deliver it chunk by chunk.

        Args:
            text (str): Arbitrary text; whitespace-only input is a no-op.
            sink (Optional[AudioSink]): Overrides the engine's sink for this call.

        Returns:
            int: Number of PCM bytes delivered.
        """
        target = sink if sink is not None else self.sink
        symbols = self.phonemes(text)
        if not symbols:
            logger.debug("No phonemes generated for text: %r", text)
            return 0
        if target is None:
            raise OutputDeviceError("No output sink configured")

        data = encode_pcm16_be(self.render_phonemes(symbols))
        for chunk in iter_chunks(data, self.settings.chunk_size):
            if self.onChunk is not None:
                self.onChunk(chunk)
            target.accept(chunk)

        logger.info(
            "Spoke %d phonemes as %d bytes (%.2f s)",
            len(symbols),
            len(data),
            len(data) / 2 / self.settings.sample_rate,
        )
        return len(data)

"""Destinations for the encoded PCM stream."""
from __future__ import annotations

import logging
import wave
from typing import Callable, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from .constants import SAMPLE_RATE

__all__ = ["AudioSink", "ChunkCallback", "CollectingSink", "TeeSink", "WavFileSink"]

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


@runtime_checkable
class AudioSink(Protocol):
    """Anything that accepts 16-bit big-endian mono PCM chunks in order."""

    def accept(self, chunk: bytes) -> None:
        ...


class CollectingSink:
    """Keeps every chunk in memory."""

    def __init__(self) -> None:
        self.chunks: List[bytes] = []

    def accept(self, chunk: bytes) -> None:
        self.chunks.append(bytes(chunk))

    @property
    def data(self) -> bytes:
        return b''.join(self.chunks)

    def clear(self) -> None:
        self.chunks.clear()


class TeeSink:
    """Hands each chunk to several sinks, in order."""

    def __init__(self, sinks: Sequence[AudioSink]) -> None:
        self.sinks = list(sinks)

    def accept(self, chunk: bytes) -> None:
        for sink in self.sinks:
            sink.accept(chunk)


class WavFileSink:
    """Streams chunks into a 16-bit mono WAV file."""

    def __init__(self, path: str, sampleRate: int = SAMPLE_RATE) -> None:
        self.path = path
        self._wave: Optional[wave.Wave_write] = wave.open(path, 'wb')
        self._wave.setnchannels(1)
        self._wave.setsampwidth(2)
        self._wave.setframerate(sampleRate)

    def accept(self, chunk: bytes) -> None:
        if self._wave is None:
            raise ValueError(f'WAV sink already closed: {self.path}')
        # WAV stores little-endian samples.
        frames = np.frombuffer(chunk, dtype='>i2').astype('<i2')
        self._wave.writeframes(frames.tobytes())

    def close(self) -> None:
        if self._wave is not None:
            self._wave.close()
            self._wave = None
            logger.debug("Closed WAV sink %s", self.path)

    def __enter__(self) -> "WavFileSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

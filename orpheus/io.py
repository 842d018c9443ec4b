"""PCM encoding and WAV output helpers."""
from __future__ import annotations

import os
import wave
from typing import Iterator

import numpy as np

from .constants import CHUNK_SIZE, DTYPE, PCM_SCALE, SAMPLE_RATE
from .core import _ensure_array

__all__ = ["encode_pcm16_be", "decode_pcm16_be", "iter_chunks", "write_wav", "write_pcm_wav"]

_PCM_BE = np.dtype('>i2')
_PCM_LE = np.dtype('<i2')


def encode_pcm16_be(audio: np.ndarray) -> bytes:
    """Clip to [-1, 1] and encode as signed 16-bit big-endian PCM."""
    audio = _ensure_array(audio, dtype=np.float64)
    data16 = (np.clip(audio, -1.0, 1.0) * PCM_SCALE).astype(np.int16)
    return data16.astype(_PCM_BE).tobytes()


def decode_pcm16_be(data: bytes) -> np.ndarray:
    """Inverse of :func:`encode_pcm16_be` (odd trailing byte ignored)."""
    usable = len(data) - (len(data) % 2)
    samples = np.frombuffer(data[:usable], dtype=_PCM_BE)
    return (samples.astype(np.float64) / PCM_SCALE).astype(DTYPE)


def iter_chunks(data: bytes, chunkSize: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield consecutive slices of at most ``chunkSize`` bytes."""
    if chunkSize <= 0:
        raise ValueError('chunkSize must be positive')
    for start in range(0, len(data), chunkSize):
        yield data[start:start + chunkSize]


def write_pcm_wav(path: str, pcmBigEndian: bytes, sampleRate: int = SAMPLE_RATE) -> str:
    """Write big-endian PCM bytes to ``path`` as a 16-bit mono WAV."""
    usable = len(pcmBigEndian) - (len(pcmBigEndian) % 2)
    frames = np.frombuffer(pcmBigEndian[:usable], dtype=_PCM_BE).astype(_PCM_LE)
    with wave.open(path, 'wb') as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sampleRate)
        wf.writeframes(frames.tobytes())
    return os.path.abspath(path)


def write_wav(path: str, audio: np.ndarray, sampleRate: int = SAMPLE_RATE) -> str:
    """Write float ``audio`` to ``path`` as 16-bit PCM mono WAV."""
    return write_pcm_wav(path, encode_pcm16_be(audio), sampleRate)

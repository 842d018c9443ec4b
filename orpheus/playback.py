"""Speaker output through PyAudio."""
from __future__ import annotations

import logging
import threading
from typing import Optional

import numpy as np
import pyaudio

from .constants import SAMPLE_RATE
from .errors import OutputDeviceError

__all__ = ["PyAudioSink"]

logger = logging.getLogger(__name__)


class PyAudioSink:
    """Plays big-endian PCM chunks on the default output device.

    The stream is opened on the first chunk and kept until :meth:`finish`;
    :meth:`close` also releases the PyAudio backend.
    """

    def __init__(
        self,
        sampleRate: int = SAMPLE_RATE,
        *,
        backend: Optional[pyaudio.PyAudio] = None,
    ) -> None:
        self.sampleRate = sampleRate
        self._pyaudio = backend
        self._stream = None
        self._lock = threading.Lock()

    def _ensure_backend(self) -> pyaudio.PyAudio:
        if self._pyaudio is None:
            try:
                self._pyaudio = pyaudio.PyAudio()
            except OSError as error:
                raise OutputDeviceError("Audio backend is unavailable") from error
        return self._pyaudio

    def _ensure_stream(self):
        if self._stream is None:
            backend = self._ensure_backend()
            try:
                self._stream = backend.open(
                    format=pyaudio.paInt16,
                    channels=1,
                    rate=self.sampleRate,
                    output=True,
                )
            except OSError as error:
                raise OutputDeviceError(
                    f"Cannot open output stream at {self.sampleRate} Hz"
                ) from error
            logger.debug("Opened PyAudio output stream at %d Hz", self.sampleRate)
        return self._stream

    def accept(self, chunk: bytes) -> None:
        # PyAudio expects native-endian int16.
        native = np.frombuffer(chunk, dtype='>i2').astype(np.int16).tobytes()
        with self._lock:
            stream = self._ensure_stream()
            try:
                stream.write(native)
            except OSError as error:
                raise OutputDeviceError("Writing to the output stream failed") from error

    def finish(self) -> None:
        """Let queued audio play out and close the stream."""
        with self._lock:
            if self._stream is None:
                return
            stream, self._stream = self._stream, None
            try:
                stream.stop_stream()
            finally:
                stream.close()

    def close(self) -> None:
        self.finish()
        if self._pyaudio is not None:
            try:
                self._pyaudio.terminate()
            except Exception:  # pragma: no cover - defensive cleanup
                logger.exception("Failed to terminate PyAudio backend.")
            finally:
                self._pyaudio = None

    def __enter__(self) -> "PyAudioSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

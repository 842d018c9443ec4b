"""Background worker that serialises speech requests against one sink."""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from .engine import SynthesizerEngine

__all__ = ["SpeechWorker"]

logger = logging.getLogger(__name__)

_POLL_SECONDS = 0.1


@dataclass
class _Lifecycle:
    """Exit bookkeeping shared between one worker thread and ``shutdown``."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    exited: bool = False
    close_requested: bool = False


class SpeechWorker:
    """Queue-driven helper that speaks one utterance at a time.

    ``onDone`` runs on the worker thread after each utterance, whether it
    succeeded or not; a UI would use it to re-enable its "speak" control.
    """

    def __init__(
        self,
        engine: SynthesizerEngine,
        onDone: Optional[Callable[[str], None]] = None,
        *,
        stopTimeout: float = 1.0,
    ) -> None:
        self.engine = engine
        self.onDone = onDone
        self.stopTimeout = stopTimeout
        self._queue: Optional[queue.Queue[Optional[str]]] = None
        self._stop_event: Optional[threading.Event] = None
        self._worker: Optional[threading.Thread] = None
        self._lifecycle: Optional[_Lifecycle] = None

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> None:
        """Ensure that the worker thread is running."""
        if self.running:
            return
        self._queue = queue.Queue()
        self._stop_event = threading.Event()
        self._lifecycle = _Lifecycle()
        self._worker = threading.Thread(
            target=self._run,
            args=(self._queue, self._stop_event, self._lifecycle),
            daemon=True,
        )
        self._worker.start()

    def enqueue(self, text: str) -> bool:
        """Queue ``text`` for synthesis; blank text is ignored.

        Returns:
            bool: ``True`` when the text was queued.
        """
        if not text.strip():
            return False
        if not self.running:
            self.start()
        assert self._queue is not None
        self._queue.put(text)
        return True

    def join(self) -> None:
        """Block until every queued utterance has been handled."""
        if self._queue is not None:
            self._queue.join()

    def stop(self) -> bool:
        """Stop the worker thread; queued text that has not started is dropped.

        An utterance already being spoken runs to completion.

        Returns:
            bool: ``True`` when the thread exited within ``stopTimeout``.
        """
        if not self._worker:
            return True
        if self._stop_event:
            self._stop_event.set()
        if self._queue:
            self._queue.put(None)
        worker = self._worker
        worker.join(timeout=self.stopTimeout)
        self._worker = None
        self._queue = None
        self._stop_event = None
        return not worker.is_alive()

    def shutdown(self) -> None:
        """Stop the worker and close the engine's sink if it can be closed.

        If the thread is still speaking, it closes the sink itself once the
        utterance is finished.
        """
        lifecycle = self._lifecycle
        self.stop()
        if lifecycle is None:
            self._close_sink()
            return
        with lifecycle.lock:
            if not lifecycle.exited:
                lifecycle.close_requested = True
                logger.debug("Worker still speaking; sink closes when it finishes")
                return
        self._close_sink()

    def _close_sink(self) -> None:
        close = getattr(self.engine.sink, "close", None)
        if callable(close):
            try:
                close()
            except Exception:  # pragma: no cover
                logger.exception("Failed to close audio sink.")

    def _run(
        self,
        work: "queue.Queue[Optional[str]]",
        stop_event: threading.Event,
        lifecycle: _Lifecycle,
    ) -> None:
        try:
            while not stop_event.is_set():
                try:
                    item = work.get(timeout=_POLL_SECONDS)
                except queue.Empty:
                    continue
                try:
                    if item is not None:
                        self._speak(item)
                finally:
                    work.task_done()
        finally:
            with lifecycle.lock:
                lifecycle.exited = True
                close = lifecycle.close_requested
            if close:
                self._close_sink()

    def _speak(self, item: str) -> None:
        try:
            self.engine.speak(item)
        except Exception:
            logger.exception("Failed to speak text: %r", item)
        if self.onDone is not None:
            try:
                self.onDone(item)
            except Exception:
                logger.exception("onDone callback failed for: %r", item)

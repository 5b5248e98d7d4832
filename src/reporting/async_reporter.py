"""
Reporter that hands observations to a dedicated reporting thread.

report() only enqueues, so the inference thread is never held up by a
slow sink. The queue is bounded; when it is full the observation is
dropped and counted.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional

from models.observation import Observation
from .base import ResultReporter

_STOP = object()


class AsyncReporter(ResultReporter):
    def __init__(self, inner: ResultReporter, max_queue: int = 256):
        if max_queue <= 0:
            raise ValueError(f"max_queue must be positive, got {max_queue}")
        self._inner = inner
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=max_queue)
        self._lock = threading.Lock()
        self._closed = False
        self._dropped = 0
        self._worker: Optional[threading.Thread] = threading.Thread(
            target=self._drain, name="report-0", daemon=True
        )
        self._worker.start()

    @property
    def inner(self) -> ResultReporter:
        return self._inner

    @property
    def dropped(self) -> int:
        """Observations discarded because the queue was full or the reporter closed."""
        with self._lock:
            return self._dropped

    def report(self, observation: Observation) -> None:
        with self._lock:
            if self._closed:
                self._dropped += 1
                logging.warning(f"Reporter closed, dropping observation: {observation.describe()}")
                return
            try:
                self._queue.put_nowait(observation)
            except queue.Full:
                self._dropped += 1
                logging.warning(f"Report queue full, dropping observation: {observation.describe()}")

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            try:
                self._inner.report(item)
            except Exception as e:
                logging.warning(f"Reporter error: {e}")

    def close(self) -> None:
        """Deliver everything already queued, then close the wrapped reporter."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        # Blocks until the worker makes room; everything queued before it is delivered
        self._queue.put(_STOP)
        if self._worker is not None:
            self._worker.join()
            self._worker = None
        if self._dropped:
            logging.warning(f"Reporter dropped {self._dropped} observations")
        self._inner.close()

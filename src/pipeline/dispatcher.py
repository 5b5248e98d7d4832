"""
Frame-to-inference dispatcher.

Routes each frame to the classifier or detector path, keeps the top label
of every recognized object, maps boxes into the frame's pixel space and
hands the resulting observations to the reporter.

Threading:
- submit() is called from the frame loop and never blocks.
- Inference runs on a single "inference" worker thread.
- At most one inference is in flight. A frame submitted while one is
  running is dropped (drop-newest) and produces no observations.
- Observations are reported on the reporter's own thread.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional

from inference.backend import InferenceModel
from inference.errors import InferenceError
from models.frame import FrameData
from models.geometry import normalized_to_pixel
from models.observation import FrameResult, ModelVariant, Observation, RecognizedObject
from reporting.async_reporter import AsyncReporter
from reporting.base import ResultReporter


@dataclass
class DispatchStats:
    """Counters for dispatched frames."""
    submitted: int = 0
    dropped: int = 0
    processed: int = 0
    failed: int = 0
    observations: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "submitted": self.submitted,
            "dropped": self.dropped,
            "processed": self.processed,
            "failed": self.failed,
            "observations": self.observations,
        }


class InferenceDispatcher:
    """
    Single-flight dispatcher for one frame stream.

    Example:
        dispatcher = InferenceDispatcher(model, ModelVariant.DETECTOR, LoggingReporter())
        for frame_data in source:
            dispatcher.submit(frame_data)
        dispatcher.close()
    """

    def __init__(
        self,
        model: InferenceModel,
        variant: ModelVariant,
        reporter: ResultReporter,
    ):
        self.model = model
        self.variant = variant
        if not isinstance(reporter, AsyncReporter):
            reporter = AsyncReporter(reporter)
        self._reporter = reporter
        self._gate = threading.Lock()
        self._stats_lock = threading.Lock()
        self._stats = DispatchStats()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="inference")
        self._closed = False

    @property
    def busy(self) -> bool:
        """Whether an inference is currently in flight."""
        return self._gate.locked()

    @property
    def stats(self) -> DispatchStats:
        with self._stats_lock:
            return DispatchStats(**self._stats.to_dict())

    def submit(self, frame_data: FrameData) -> Optional["Future[FrameResult]"]:
        """
        Start inference for a frame unless one is already in flight.

        Returns:
            A Future resolved with the frame's FrameResult, or None if the
            frame was dropped.
        """
        if self._closed:
            raise RuntimeError("Dispatcher is closed")

        if not self._gate.acquire(blocking=False):
            with self._stats_lock:
                self._stats.dropped += 1
            logging.debug(f"Inference busy, dropping frame {frame_data.frame_index}")
            return None

        with self._stats_lock:
            self._stats.submitted += 1
        try:
            return self._executor.submit(self._run, frame_data)
        except RuntimeError:
            self._gate.release()
            raise

    def _run(self, frame_data: FrameData) -> FrameResult:
        try:
            result = self.process(frame_data)
        finally:
            self._gate.release()

        for observation in result.observations:
            self._reporter.report(observation)
        return result

    def process(self, frame_data: FrameData) -> FrameResult:
        """
        Run inference for one frame on the calling thread.

        Inference failures are logged and yield a FrameResult with an error
        and no observations; they never propagate.
        """
        try:
            objects = self.model.infer(frame_data.frame)
        except InferenceError as e:
            return self._fail(frame_data, str(e))
        except Exception as e:
            return self._fail(frame_data, f"Unexpected inference failure: {e!r}")

        if self.variant == ModelVariant.CLASSIFIER:
            observations = self._classification(frame_data, objects)
            if not observations:
                return self._fail(frame_data, "No observations from classification request")
        else:
            observations = self._detections(frame_data, objects)

        with self._stats_lock:
            self._stats.processed += 1
            self._stats.observations += len(observations)
        return FrameResult(frame_index=frame_data.frame_index, observations=observations)

    def _fail(self, frame_data: FrameData, message: str) -> FrameResult:
        logging.error(f"Frame {frame_data.frame_index} dropped: {message}")
        with self._stats_lock:
            self._stats.failed += 1
        return FrameResult(frame_index=frame_data.frame_index, error=message)

    def _classification(self, frame_data: FrameData, objects: List[RecognizedObject]) -> List[Observation]:
        if not objects:
            return []
        top = objects[0].top_label()
        if top is None:
            return []
        return [
            Observation(
                label=top.identifier,
                confidence=top.confidence,
                frame_index=frame_data.frame_index,
                timestamp=frame_data.timestamp,
                source=frame_data.source,
            )
        ]

    def _detections(self, frame_data: FrameData, objects: List[RecognizedObject]) -> List[Observation]:
        out: List[Observation] = []
        for obj in objects:
            top = obj.top_label()
            if top is None:
                logging.debug(f"Frame {frame_data.frame_index}: skipping object without labels")
                continue
            bounds = (
                normalized_to_pixel(obj.bounds, frame_data.width, frame_data.height)
                if obj.bounds is not None
                else None
            )
            out.append(
                Observation(
                    label=top.identifier,
                    confidence=top.confidence,
                    bounds=bounds,
                    normalized_bounds=obj.bounds,
                    frame_index=frame_data.frame_index,
                    timestamp=frame_data.timestamp,
                    source=frame_data.source,
                )
            )
        return out

    def close(self) -> None:
        """Wait for the in-flight inference and queued reports, then release threads."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        self._reporter.close()

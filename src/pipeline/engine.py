"""
Pipeline engine: the frame loop.

Reads frames from an ObservationSource and submits each one to the
InferenceDispatcher. The loop itself never waits for inference; frames
that arrive while the dispatcher is busy are dropped by the dispatcher.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from models.config import Config, PipelineSettings
from models.frame import FrameData
from models.observation import FrameResult
from observation import ObservationSource, create_source_from_config
from .dispatcher import InferenceDispatcher

FrameCallback = Callable[[FrameData, Optional["Future[FrameResult]"]], None]


@dataclass
class PipelineStats:
    """Runtime statistics for the frame loop."""
    frame_count: int = 0
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)
    consecutive_failures: int = 0


class PipelineEngine:
    """
    Main processing loop.

    Example:
        source = OpenCVSource(OpenCVSourceConfig(device_id=0))
        dispatcher = InferenceDispatcher(model, ModelVariant.DETECTOR, LoggingReporter())
        engine = PipelineEngine(source, dispatcher, PipelineSettings())
        engine.run()
    """

    def __init__(
        self,
        source: ObservationSource,
        dispatcher: InferenceDispatcher,
        config: PipelineSettings,
        retry_delay: float = 0.5,
    ):
        self.source = source
        self.dispatcher = dispatcher
        self.config = config
        self.retry_delay = retry_delay
        self.stats = PipelineStats()
        self._running = False
        self._callbacks: List[FrameCallback] = []

    def add_callback(self, callback: FrameCallback) -> None:
        """
        Add a callback to be called after each frame is submitted.

        Args:
            callback: Function taking (frame_data, future) where future is
                None if the frame was dropped.
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """
        Run the frame loop until stopped, the source is exhausted or
        max_frames is reached. Closes the source and the dispatcher on exit.
        """
        self._running = True
        self.stats = PipelineStats()

        try:
            self.source.open()
            logging.info(
                f"Pipeline started: source={self.source.source_id}, "
                f"variant={self.dispatcher.variant.value}"
            )

            while self._running:
                frame_data = self.source.read()

                if frame_data is None:
                    if self.source.exhausted:
                        logging.info(f"Source {self.source.source_id} exhausted, stopping")
                        break
                    self.stats.consecutive_failures += 1
                    if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                        logging.error(
                            f"Too many consecutive failures ({self.stats.consecutive_failures}), stopping"
                        )
                        break
                    logging.warning(
                        f"Frame read failed ({self.stats.consecutive_failures}/"
                        f"{self.config.max_consecutive_failures})"
                    )
                    time.sleep(self.retry_delay)
                    continue

                self.stats.consecutive_failures = 0
                self.stats.frame_count += 1
                future = self.dispatcher.submit(frame_data)

                for callback in self._callbacks:
                    try:
                        callback(frame_data, future)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                if self.config.max_frames is not None and self.stats.frame_count >= self.config.max_frames:
                    logging.info(f"Reached max_frames={self.config.max_frames}, stopping")
                    break

                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            self._log_stats()
            self.stats.last_stats_log_time = now

    def _log_stats(self) -> None:
        d = self.dispatcher.stats
        logging.info(
            f"Pipeline stats: frames={self.stats.frame_count}, submitted={d.submitted}, "
            f"dropped={d.dropped}, failed={d.failed}, observations={d.observations}"
        )

    def _cleanup(self) -> None:
        self._running = False

        try:
            self.source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        self.dispatcher.close()
        self._log_stats()
        logging.info("Pipeline stopped")


def create_engine_from_config(config: Config, dispatcher: InferenceDispatcher) -> PipelineEngine:
    """Factory: build a PipelineEngine around the configured camera source."""
    source = create_source_from_config(config.camera, source_id="main-camera")
    return PipelineEngine(source, dispatcher, config.pipeline)

"""
Concrete result reporters: log lines and JSON-lines files.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Optional, TextIO

from models.observation import Observation
from .base import ResultReporter


class LoggingReporter(ResultReporter):
    """Writes one log line per observation."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger or logging.getLogger("visionhelper.observations")
        self._level = level

    def report(self, observation: Observation) -> None:
        self._logger.log(self._level, observation.describe())

    def close(self) -> None:
        pass


class JsonlReporter(ResultReporter):
    """Appends observations to a JSON-lines file."""

    def __init__(self, path: str):
        self.path = path
        out_dir = os.path.dirname(path)
        if out_dir and not os.path.exists(out_dir):
            os.makedirs(out_dir)
        self._fh: Optional[TextIO] = open(path, "a", encoding="utf-8")
        self._lock = threading.Lock()
        logging.info(f"Writing observations to {path}")

    def report(self, observation: Observation) -> None:
        line = json.dumps(observation.to_dict())
        with self._lock:
            if self._fh is None:
                return
            self._fh.write(line + "\n")
            self._fh.flush()

    def close(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None

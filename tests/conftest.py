"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import threading
import time
from typing import List

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.frame import FrameData  # noqa: E402
from models.observation import Observation  # noqa: E402


class CollectingReporter:
    """Reporter that records observations and the thread that delivered them."""

    def __init__(self):
        self.observations: List[Observation] = []
        self.threads: List[str] = []
        self.closed = False

    def report(self, observation):
        self.observations.append(observation)
        self.threads.append(threading.current_thread().name)

    def close(self):
        self.closed = True


class FakeModel:
    """Inference model returning a scripted list of results (or raising) per call."""

    def __init__(self, outputs):
        self._outputs = list(outputs)
        self.calls = 0

    def infer(self, frame):
        out = self._outputs[min(self.calls, len(self._outputs) - 1)]
        self.calls += 1
        if isinstance(out, Exception):
            raise out
        return out


def make_frame(index: int = 1, width: int = 640, height: int = 480) -> FrameData:
    return FrameData(
        frame=np.zeros((height, width, 3), dtype=np.uint8),
        width=width,
        height=height,
        timestamp=time.time(),
        frame_index=index,
        source="test",
    )


@pytest.fixture
def reporter():
    return CollectingReporter()


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  device_id: 0
  resolution: [640, 480]
  fps: 30

inference:
  variant: "detector"
  detector:
    model: "yolov8n.pt"
    conf_threshold: 0.25

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "device_id": 0,
            "resolution": [640, 480],
            "fps": 30,
        },
        "inference": {
            "variant": "classifier",
            "classifier": {"model": "yolov8n-cls.pt", "top_k": 3},
            "detector": {"model": "yolov8n.pt", "conf_threshold": 0.3, "iou_threshold": 0.5},
        },
        "pipeline": {"max_consecutive_failures": 5},
        "reporting": {"sink": "log"},
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }

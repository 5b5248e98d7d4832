"""
Observation layer for pluggable frame sources.

Each source implements the ObservationSource interface and returns
FrameData objects.
"""

from models.config import CameraConfig
from .base import ObservationSource, ObservationConfig
from .opencv_source import OpenCVSource, OpenCVSourceConfig


def create_source_from_config(camera_cfg: CameraConfig, source_id: str = "camera") -> ObservationSource:
    """Build the frame source described by the camera config."""
    return OpenCVSource(OpenCVSourceConfig.from_camera_config(camera_cfg, source_id=source_id))


__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "create_source_from_config",
]

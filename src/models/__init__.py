"""
Typed models for the vision helper application.
"""

from .frame import FrameData
from .geometry import NormalizedRect, PixelRect, Origin, normalized_to_pixel
from .observation import (
    FrameResult,
    LabelScore,
    ModelVariant,
    Observation,
    RecognizedObject,
)
from .config import (
    Config,
    CameraConfig,
    ClassifierConfig,
    DetectorConfig,
    InferenceConfig,
    PipelineSettings,
    ReportingConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Geometry
    "NormalizedRect",
    "PixelRect",
    "Origin",
    "normalized_to_pixel",
    # Inference results
    "FrameResult",
    "LabelScore",
    "ModelVariant",
    "Observation",
    "RecognizedObject",
    # Config
    "Config",
    "CameraConfig",
    "ClassifierConfig",
    "DetectorConfig",
    "InferenceConfig",
    "PipelineSettings",
    "ReportingConfig",
]

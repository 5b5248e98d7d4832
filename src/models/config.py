"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .observation import ModelVariant


@dataclass
class CameraConfig:
    """Frame source configuration."""
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [640, 480])
    fps: int = 30
    buffer_size: int = 1
    max_retries: int = 3

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [640, 480]),
            fps=d.get("fps", 30),
            buffer_size=d.get("buffer_size", 1),
            max_retries=d.get("max_retries", 3),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "buffer_size": self.buffer_size,
            "max_retries": self.max_retries,
        }


@dataclass
class ClassifierConfig:
    """Classification model configuration."""
    model: str = "yolov8n-cls.pt"
    top_k: int = 5

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ClassifierConfig":
        return cls(
            model=d.get("model", "yolov8n-cls.pt"),
            top_k=d.get("top_k", 5),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "top_k": self.top_k}


@dataclass
class DetectorConfig:
    """Detection model configuration."""
    model: str = "yolov8n.pt"
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    classes: Optional[List[int]] = None
    class_name_overrides: Optional[Dict[int, str]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectorConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            conf_threshold=d.get("conf_threshold", 0.25),
            iou_threshold=d.get("iou_threshold", 0.45),
            classes=d.get("classes"),
            class_name_overrides=d.get("class_name_overrides"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "model": self.model,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
        }
        if self.classes is not None:
            d["classes"] = self.classes
        if self.class_name_overrides is not None:
            d["class_name_overrides"] = self.class_name_overrides
        return d


@dataclass
class InferenceConfig:
    """Variant selection plus per-variant model settings."""
    variant: ModelVariant = ModelVariant.DETECTOR
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InferenceConfig":
        return cls(
            variant=ModelVariant.parse(d.get("variant", "detector")),
            classifier=ClassifierConfig.from_dict(d.get("classifier") or {}),
            detector=DetectorConfig.from_dict(d.get("detector") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant.value,
            "classifier": self.classifier.to_dict(),
            "detector": self.detector.to_dict(),
        }


@dataclass
class PipelineSettings:
    """Frame loop settings."""
    max_consecutive_failures: int = 10
    stats_log_interval: float = 60.0
    max_frames: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PipelineSettings":
        return cls(
            max_consecutive_failures=d.get("max_consecutive_failures", 10),
            stats_log_interval=d.get("stats_log_interval", 60.0),
            max_frames=d.get("max_frames"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "max_consecutive_failures": self.max_consecutive_failures,
            "stats_log_interval": self.stats_log_interval,
        }
        if self.max_frames is not None:
            d["max_frames"] = self.max_frames
        return d


@dataclass
class ReportingConfig:
    """Where observations go."""
    sink: str = "log"
    jsonl_path: str = "output/observations.jsonl"
    max_queue: int = 256

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ReportingConfig":
        return cls(
            sink=d.get("sink", "log"),
            jsonl_path=d.get("jsonl_path", "output/observations.jsonl"),
            max_queue=d.get("max_queue", 256),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"sink": self.sink, "jsonl_path": self.jsonl_path, "max_queue": self.max_queue}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    log_path: str = "logs/visionhelper.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera") or {}),
            inference=InferenceConfig.from_dict(d.get("inference") or {}),
            pipeline=PipelineSettings.from_dict(d.get("pipeline") or {}),
            reporting=ReportingConfig.from_dict(d.get("reporting") or {}),
            log_path=d.get("log_path", "logs/visionhelper.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary."""
        return {
            "camera": self.camera.to_dict(),
            "inference": self.inference.to_dict(),
            "pipeline": self.pipeline.to_dict(),
            "reporting": self.reporting.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }

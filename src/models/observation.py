"""
Inference result models.

A backend reports RecognizedObjects (every label it produced, plus a
normalized box for detectors). The dispatcher reduces each one to an
Observation holding the top label and a pixel-space box.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .geometry import NormalizedRect, PixelRect


class ModelVariant(str, Enum):
    """Inference pipeline selected once at startup."""
    CLASSIFIER = "classifier"
    DETECTOR = "detector"

    @classmethod
    def parse(cls, value: str) -> "ModelVariant":
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(v.value for v in cls)
            raise ValueError(f"Unknown model variant '{value}' (expected one of: {choices})") from None


def _check_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"confidence must be within [0, 1], got {confidence}")


@dataclass(frozen=True)
class LabelScore:
    """A class label and its confidence."""
    identifier: str
    confidence: float

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)


@dataclass(frozen=True)
class RecognizedObject:
    """
    Raw output of an inference engine for one object.

    Classification results have a single RecognizedObject with no bounds.

    Attributes:
        labels: Candidate labels, in any order.
        bounds: Normalized bounding box (detectors only).
    """
    labels: Sequence[LabelScore]
    bounds: Optional[NormalizedRect] = None

    def top_label(self) -> Optional[LabelScore]:
        """Highest-confidence label, or None if there are no labels."""
        if not self.labels:
            return None
        return max(self.labels, key=lambda l: l.confidence)


@dataclass(frozen=True)
class Observation:
    """
    One reported inference result.

    Attributes:
        label: Class identifier.
        confidence: Confidence score (0-1).
        bounds: Bounding box in pixel coordinates (detector variant only).
        normalized_bounds: The box as reported by the engine.
        frame_index: Index of the frame this came from.
        timestamp: Capture timestamp of that frame.
        source: Source identifier of that frame.
    """
    label: str
    confidence: float
    bounds: Optional[PixelRect] = None
    normalized_bounds: Optional[NormalizedRect] = None
    frame_index: int = 0
    timestamp: Optional[float] = None
    source: Optional[str] = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "label": self.label,
            "confidence": self.confidence,
            "frame_index": self.frame_index,
            "timestamp": self.timestamp,
            "source": self.source,
        }
        if self.bounds is not None:
            d["bounds"] = {
                "x": self.bounds.x,
                "y": self.bounds.y,
                "width": self.bounds.width,
                "height": self.bounds.height,
            }
        return d

    def describe(self) -> str:
        text = f"Object: {self.label}, Confidence: {self.confidence:.3f}"
        if self.bounds is not None:
            x, y, w, h = self.bounds.as_int_tuple()
            text += f", Bounds: ({x}, {y}, {w}, {h})"
        return text


@dataclass
class FrameResult:
    """Observations produced for a single frame."""
    frame_index: int
    observations: List[Observation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

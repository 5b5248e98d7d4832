"""
Bounding box geometry: normalized and pixel-space rectangles.

Normalized rectangles carry their origin convention explicitly. Inference
backends built on numpy/OpenCV images report top-left origin boxes, while
Vision-style engines report bottom-left origin boxes (y grows upwards).
Pixel rectangles are always top-left origin, matching the frame array.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Origin(str, Enum):
    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class NormalizedRect:
    """
    A rectangle in normalized [0, 1] coordinates.

    Attributes:
        x: Left edge.
        y: Top edge for TOP_LEFT origin, bottom edge for BOTTOM_LEFT origin.
        width: Width as a fraction of the frame width.
        height: Height as a fraction of the frame height.
        origin: Vertical axis convention of ``y``.
    """
    x: float
    y: float
    width: float
    height: float
    origin: Origin = Origin.TOP_LEFT

    @classmethod
    def from_xyxy(
        cls,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        origin: Origin = Origin.TOP_LEFT,
    ) -> "NormalizedRect":
        """Create from normalized corner coordinates."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1, origin=origin)

    def to_top_left(self) -> "NormalizedRect":
        """Return the same rectangle expressed with a top-left origin."""
        if self.origin == Origin.TOP_LEFT:
            return self
        return NormalizedRect(
            x=self.x,
            y=1.0 - self.y - self.height,
            width=self.width,
            height=self.height,
            origin=Origin.TOP_LEFT,
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PixelRect:
    """
    A rectangle in absolute pixel coordinates, top-left origin.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Width in pixels.
        height: Height in pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as rounded integer (x, y, width, height) tuple."""
        return (round(self.x), round(self.y), round(self.width), round(self.height))

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x, self.y, self.x2, self.y2)


def normalized_to_pixel(rect: NormalizedRect, width: int, height: int) -> PixelRect:
    """
    Map a normalized rectangle into pixel space for a frame of the given size.

    A bottom-left origin rectangle is flipped vertically first, so the
    result always uses the frame's top-left origin. The result is clamped
    to [0, width] x [0, height].

    Args:
        rect: Normalized rectangle.
        width: Frame width in pixels.
        height: Frame height in pixels.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame dimensions must be positive, got {width}x{height}")

    top_left = rect.to_top_left()
    x = _clamp(top_left.x * width, 0.0, float(width))
    y = _clamp(top_left.y * height, 0.0, float(height))
    w = _clamp(top_left.width * width, 0.0, width - x)
    h = _clamp(top_left.height * height, 0.0, height - y)
    return PixelRect(x=x, y=y, width=w, height=h)

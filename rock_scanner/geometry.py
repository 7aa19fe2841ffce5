from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class PixelRect:
    """Axis-aligned pixel rectangle, right/bottom exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def origin(self) -> Tuple[int, int]:
        return self.left, self.top

    def translate(self, dx: int, dy: int) -> "PixelRect":
        """Move the rectangle into the coordinate space of a parent image."""
        return PixelRect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def as_box(self) -> Tuple[int, int, int, int]:
        return self.left, self.top, self.right, self.bottom

    def __str__(self) -> str:
        return f"({self.left},{self.top})-({self.right},{self.bottom})"


@dataclass(frozen=True)
class NormalizedRect:
    left: float
    top: float
    right: float
    bottom: float


def _f32(value: float) -> np.float32:
    return np.float32(value)


def rect_from_normalized(size: Tuple[int, int], roi: NormalizedRect) -> PixelRect:
    """Convert a normalized ROI to absolute pixels inside an image of ``size``."""
    width, height = _f32(size[0]), _f32(size[1])
    # Single precision keeps the edges on the pixels the HUD layout was measured on.
    return PixelRect(
        left=int(width * _f32(roi.left)),
        top=int(height * _f32(roi.top)),
        right=int(width * _f32(roi.right)),
        bottom=int(height * _f32(roi.bottom)),
    )


def composition_rect(
    anchor: PixelRect,
    size: Tuple[int, int],
    left_pad: float,
    width_factor: float,
    height_factor: int,
) -> PixelRect:
    """Derive the composition panel below-right of the anchor label, clamped to the image."""
    image_width, image_height = size
    return PixelRect(
        left=max(int(_f32(anchor.left) - _f32(image_width) * _f32(left_pad)), 0),
        top=max(anchor.top + anchor.height // 2, 0),
        right=min(anchor.right + int(_f32(width_factor) * _f32(anchor.width)), image_width),
        bottom=min(anchor.bottom + height_factor * anchor.height, image_height),
    )

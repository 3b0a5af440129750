"""Pixel canvas and integer line rasterization."""
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .exceptions import PreconditionError


class Canvas:
    """2-D grid of palette indices addressed as ``(row, column)``."""

    def __init__(self, width: int, height: int, background: int = 0) -> None:
        if width <= 0 or height <= 0:
            raise PreconditionError("Canvas needs a positive size", {"width": width, "height": height})
        self.width = width
        self.height = height
        self.background = background
        self.pixels = np.full((height, width), background, dtype=np.uint8)

    def clear(self, color: Optional[int] = None) -> None:
        if color is not None:
            self.background = color
        self.pixels.fill(self.background)

    def set_pixel(self, x: int, y: int, color: int) -> None:
        # numpy would wrap negative indices instead of failing
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PreconditionError(
                "Pixel outside canvas",
                {"x": x, "y": y, "width": self.width, "height": self.height},
            )
        self.pixels[y, x] = color

    def get_pixel(self, x: int, y: int) -> int:
        return int(self.pixels[y, x])

    def lit_pixels(self, color: Optional[int] = None) -> List[Tuple[int, int]]:
        """Return ``(x, y)`` of every non-background pixel, or of one color."""
        if color is None:
            mask = self.pixels != self.background
        else:
            mask = self.pixels == color
        rows, cols = np.nonzero(mask)
        return sorted((int(x), int(y)) for y, x in zip(rows, cols))


def draw_line(canvas: Canvas, x1: int, y1: int, x2: int, y2: int, color: int) -> None:
    """Plot a straight segment using integer Bresenham stepping."""

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    while True:
        canvas.set_pixel(x1, y1, color)
        if x1 == x2 and y1 == y2:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x1 += sx
        if e2 < dx:
            err += dx
            y1 += sy

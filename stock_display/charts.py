"""Chart rendering onto a pixel canvas."""
from __future__ import annotations

import math
import struct
import zlib
from pathlib import Path
from typing import Callable

from .exceptions import PreconditionError
from .models import ChartStyle, PriceSeries, RenderWindow, ScaleContext
from .palette import COLOR_NAMES, RGB, color_rgb
from .raster import Canvas, draw_line
from .utils import ensure_dir


class ChartRenderer:
    """Paint the visible window of a sanitized series as per-step segments.

    Consecutive samples are spaced by index, not by elapsed time, so gaps
    in trading (nights, weekends, skipped samples) are not visible on the
    horizontal axis.
    """

    def __init__(self, style: ChartStyle) -> None:
        self.style = style

    def render(
        self,
        canvas: Canvas,
        series: PriceSeries,
        window: RenderWindow,
        scale: ScaleContext,
    ) -> float:
        """Draw ``window.count - 1`` segments and return the last close drawn."""

        count = window.count
        if len(series) == 0:
            raise PreconditionError("Cannot render an empty series")
        if count > len(series) or count > canvas.width:
            raise PreconditionError(
                "Render window exceeds series or canvas",
                {"count": count, "series": len(series), "width": canvas.width},
            )

        values = series.values[-count:]
        previous = values[0]
        for step in range(1, count):
            current = values[step]
            x = math.floor(step * scale.x_scale)
            y1 = self._row(previous, scale)
            y2 = self._row(current, scale)
            color = self.style.increase_color if y1 > y2 else self.style.decrease_color
            draw_line(canvas, x, self._clamp(y1, canvas), x, self._clamp(y2, canvas), color)
            previous = current
        return values[-1]

    def _row(self, value: float, scale: ScaleContext) -> int:
        return math.floor((scale.max_price - value) * scale.y_scale) + self.style.header_offset

    @staticmethod
    def _clamp(row: int, canvas: Canvas) -> int:
        # The header offset can push the lowest price past the bottom edge.
        return max(0, min(canvas.height - 1, row))


def write_png(
    canvas: Canvas,
    path: str | Path,
    scale: int = 1,
    palette: Callable[[int], RGB] = color_rgb,
) -> Path:
    """Write ``canvas`` as an RGB PNG, each pixel blown up to ``scale`` squared."""

    path = Path(path)
    ensure_dir(path.parent)
    scale = max(1, int(scale))
    width, height = canvas.width * scale, canvas.height * scale
    lookup = [palette(idx) for idx in range(len(COLOR_NAMES))]
    raw_rows = []
    for row in canvas.pixels:
        line = b"".join(bytes(lookup[int(idx)]) * scale for idx in row)
        raw_rows.extend([b"\x00" + line] * scale)
    _write_png(path, width, height, b"".join(raw_rows))
    return path


def _write_png(path: Path, width: int, height: int, raw: bytes) -> None:
    def chunk(tag: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + tag
            + data
            + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
        )

    compressed = zlib.compress(raw, level=9)
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    png_bytes = b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IDAT", compressed) + chunk(b"IEND", b"")
    with path.open("wb") as handle:
        handle.write(png_bytes)


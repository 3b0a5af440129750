"""Unit tests for chart rendering."""
from __future__ import annotations

import struct
import zlib

import pytest

from stock_display.charts import ChartRenderer, write_png
from stock_display.exceptions import PreconditionError
from stock_display.models import ChartStyle, PriceSeries, RenderWindow
from stock_display.palette import color_rgb
from stock_display.raster import Canvas
from stock_display.scaling import compute_scale
from stock_display.series import sanitize_series

STYLE = ChartStyle()


def _series(values) -> PriceSeries:
    return PriceSeries(values=list(values), timestamps=[60 * idx for idx in range(len(values))])


def test_gappy_series_renders_trend_colored_segments() -> None:
    series = sanitize_series(_series([100.0, None, 102.0, 98.0, 103.0]))
    assert series.values == [100.0, 102.0, 98.0, 103.0]

    window = RenderWindow(3)
    scale = compute_scale(series, window.count, width=30, rows=10, v_res=3)
    canvas = Canvas(30, 30)
    last = ChartRenderer(STYLE).render(canvas, series, window, scale)

    assert last == 103.0
    falling = canvas.lit_pixels(STYLE.decrease_color)
    rising = canvas.lit_pixels(STYLE.increase_color)
    assert {x for x, _ in falling} == {10}
    assert {x for x, _ in rising} == {20}
    # 102 -> 98 runs down from row 9; 98 -> 103 climbs back to the header offset
    assert min(y for _, y in falling) == 9
    assert min(y for _, y in rising) == STYLE.header_offset
    assert max(y for _, y in canvas.lit_pixels()) == canvas.height - 1


def test_flat_series_draws_horizontal_dots() -> None:
    series = _series([5.0, 5.0, 5.0, 5.0])
    window = RenderWindow(4)
    scale = compute_scale(series, window.count, width=10, rows=4, v_res=3)
    canvas = Canvas(10, 12)
    last = ChartRenderer(STYLE).render(canvas, series, window, scale)
    assert last == 5.0
    assert canvas.lit_pixels() == [(2, 4), (5, 4), (7, 4)]
    assert canvas.lit_pixels(STYLE.decrease_color) == canvas.lit_pixels()


def test_single_point_window_draws_nothing() -> None:
    series = _series([42.0])
    window = RenderWindow.for_series(len(series), 10)
    scale = compute_scale(series, window.count, width=10, rows=4, v_res=3)
    canvas = Canvas(10, 12)
    assert ChartRenderer(STYLE).render(canvas, series, window, scale) == 42.0
    assert canvas.lit_pixels() == []


def test_render_window_limited_by_width_and_length() -> None:
    assert RenderWindow.for_series(500, 164).count == 164
    assert RenderWindow.for_series(12, 164).count == 12
    with pytest.raises(ValueError):
        RenderWindow.for_series(0, 164)


def test_renderer_rejects_bad_preconditions() -> None:
    renderer = ChartRenderer(STYLE)
    series = _series([1.0, 2.0, 3.0])
    scale = compute_scale(series, 3, width=10, rows=4, v_res=3)
    with pytest.raises(PreconditionError):
        renderer.render(Canvas(10, 12), series, RenderWindow(4), scale)
    with pytest.raises(PreconditionError):
        renderer.render(Canvas(2, 12), series, RenderWindow(3), scale)
    with pytest.raises(PreconditionError):
        renderer.render(Canvas(10, 12), _series([]), RenderWindow(1), scale)


def test_write_png_scales_pixels(tmp_path) -> None:
    canvas = Canvas(3, 2, background=15)
    canvas.set_pixel(0, 0, STYLE.increase_color)
    path = write_png(canvas, tmp_path / "out" / "chart.png", scale=2)

    data = path.read_bytes()
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    assert struct.unpack(">II", data[16:24]) == (6, 4)
    idat_len = struct.unpack(">I", data[33:37])[0]
    assert data[37:41] == b"IDAT"
    raw = zlib.decompress(data[41 : 41 + idat_len])
    assert len(raw) == 4 * (1 + 6 * 3)
    assert tuple(raw[1:4]) == color_rgb(STYLE.increase_color)
    assert tuple(raw[4:7]) == color_rgb(STYLE.increase_color)
    assert tuple(raw[7:10]) == color_rgb(15)

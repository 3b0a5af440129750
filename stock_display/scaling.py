"""Scale factors mapping prices onto the display grid."""
from __future__ import annotations

import math

from .exceptions import PreconditionError
from .models import PriceSeries, ScaleContext


def lookback_count(count: int, factor: float = 1.5) -> int:
    return int(math.ceil(count * factor))


def compute_scale(
    series: PriceSeries,
    count: int,
    width: int,
    rows: int,
    v_res: int,
    lookback_factor: float = 1.5,
) -> ScaleContext:
    """Compute horizontal/vertical scale and the price range for one pass.

    The price range is taken over a lookback window wider than the render
    window so the line does not touch the top and bottom edges. One text row
    of vertical budget is kept free for the header. A flat range yields a
    zero vertical scale, which draws a horizontal line.
    """

    if count <= 0:
        raise PreconditionError("Render window must be positive", {"count": count})
    if len(series) == 0:
        raise PreconditionError("Cannot scale an empty series")
    if not series.is_sanitized:
        raise PreconditionError("Series still holds missing samples")

    lookback = lookback_count(count, lookback_factor)
    window = series.values[-lookback:]
    min_price = min(window)
    max_price = max(window)

    x_scale = width / count
    price_range = max_price - min_price
    if price_range > 0:
        y_scale = (rows - 1) * v_res / price_range
    else:
        y_scale = 0.0
    return ScaleContext(
        x_scale=x_scale,
        y_scale=y_scale,
        min_price=min_price,
        max_price=max_price,
    )

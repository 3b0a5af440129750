"""Removal of missing close samples."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .models import PriceSeries


def sanitize_values(
    values: Sequence[Optional[float]], timestamps: Sequence[int]
) -> Tuple[List[float], List[int]]:
    """Drop positions whose value is missing, keeping order and index pairing."""

    if len(values) != len(timestamps):
        raise ValueError("values and timestamps must have the same length")
    kept_values: List[float] = []
    kept_timestamps: List[int] = []
    for value, timestamp in zip(values, timestamps):
        if value is None:
            continue
        kept_values.append(float(value))
        kept_timestamps.append(timestamp)
    return kept_values, kept_timestamps


def sanitize_series(series: PriceSeries) -> PriceSeries:
    """Return a new series without missing samples; the input is left untouched."""

    values, timestamps = sanitize_values(series.values, series.timestamps)
    return PriceSeries(values=values, timestamps=timestamps)

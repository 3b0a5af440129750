"""Unit tests for series sanitizing."""
from __future__ import annotations

import pytest

from stock_display.models import PriceSeries
from stock_display.series import sanitize_series, sanitize_values


def test_missing_values_removed_in_order() -> None:
    series = PriceSeries(values=[100.0, None, 102.0, None, 98.0], timestamps=[1, 2, 3, 4, 5])
    cleaned = sanitize_series(series)
    assert cleaned.values == [100.0, 102.0, 98.0]
    assert cleaned.timestamps == [1, 3, 5]
    assert len(cleaned) == len(series) - 2
    assert cleaned.is_sanitized


def test_input_is_not_mutated() -> None:
    values = [1.0, None, 3.0]
    timestamps = [10, 20, 30]
    series = PriceSeries(values=values, timestamps=timestamps)
    sanitize_series(series)
    assert series.values == [1.0, None, 3.0]
    assert series.timestamps == [10, 20, 30]


def test_empty_series_yields_empty_output() -> None:
    cleaned = sanitize_series(PriceSeries())
    assert len(cleaned) == 0
    assert cleaned.last_value is None


def test_all_missing_yields_empty_output() -> None:
    values, timestamps = sanitize_values([None, None], [1, 2])
    assert values == []
    assert timestamps == []


def test_mismatched_lengths_rejected() -> None:
    with pytest.raises(ValueError):
        PriceSeries(values=[1.0, 2.0], timestamps=[1])
    with pytest.raises(ValueError):
        sanitize_values([1.0], [1, 2])

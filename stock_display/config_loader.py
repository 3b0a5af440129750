"""Configuration loading utilities without external YAML deps."""
from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .models import ChartStyle

DEFAULT_STOCKS: List[Tuple[str, str]] = [
    ("AAPL", "US"),
    ("GOOGL", "US"),
    ("AMZN", "US"),
    ("META", "US"),
    ("MSFT", "US"),
    ("TSLA", "US"),
    ("BABA", "US"),
    ("NQ=F", "US"),
    ("LQQ.PA", "EU"),
]

DEFAULT_INTERVALS: List[Tuple[str, str]] = [
    ("1m", "5d"),
    ("2m", "5d"),
    ("5m", "5d"),
    ("15m", "5d"),
    ("30m", "1mo"),
    ("1h", "1mo"),
    ("1d", "2y"),
    ("1mo", "max"),
]


@dataclass
class AppConfig:
    """Container for configuration values."""

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def display(self) -> Dict[str, Any]:
        return self.raw.get("display", {})

    @property
    def polling(self) -> Dict[str, Any]:
        return self.raw.get("polling", {})

    @property
    def data_source(self) -> Dict[str, Any]:
        return self.raw.get("data_source", {})

    @property
    def selection(self) -> Dict[str, Any]:
        return self.raw.get("selection", {})

    def chart_style(self) -> ChartStyle:
        """Build the immutable style handed to the renderer and formatter."""
        display = self.display
        return ChartStyle.from_names(
            text_color=display.get("text_color", "white"),
            increase_color=display.get("increase_color", "lime"),
            decrease_color=display.get("decrease_color", "red"),
            background_color=display.get("background_color", "black"),
            header_offset=int(display.get("header_offset", 4)),
            lookback_factor=float(display.get("lookback_factor", 1.5)),
        )

    def polling_range(self) -> Tuple[float, float]:
        low = float(self.polling.get("min_seconds", 20))
        high = float(self.polling.get("max_seconds", 60))
        if high < low:
            raise ValueError(f"polling.max_seconds ({high}) is below polling.min_seconds ({low})")
        return low, high

    def stock_choices(self) -> List[Tuple[str, str]]:
        return _pairs(self.selection.get("stocks"), DEFAULT_STOCKS)

    def interval_choices(self) -> List[Tuple[str, str]]:
        return _pairs(self.selection.get("intervals"), DEFAULT_INTERVALS)


def load_config(path: str | Path) -> AppConfig:
    """Load configuration from a small YAML subset."""
    with Path(path).expanduser().open("r", encoding="utf-8") as handle:
        lines = handle.readlines()
    raw = _parse_simple_yaml(lines)
    config = AppConfig(raw=raw)
    # Fail at load time on unknown color names or a reversed polling range.
    config.chart_style()
    config.polling_range()
    return config


def _pairs(value: Any, default: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    if not value:
        return list(default)
    pairs: List[Tuple[str, str]] = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(f"Expected a [name, value] pair, got {item!r}")
        pairs.append((str(item[0]), str(item[1])))
    return pairs


def _parse_simple_yaml(lines: List[str]) -> Dict[str, Any]:
    root: Dict[str, Any] = {}
    stack: List[Tuple[int, Dict[str, Any]]] = [(0, root)]
    for raw_line in lines:
        line = raw_line.rstrip()
        if not line or line.lstrip().startswith("#"):
            continue
        indent = len(line) - len(line.lstrip(" "))
        key, _, value = line.lstrip().partition(":")
        key = key.strip()
        value = value.strip()
        while stack and indent < stack[-1][0]:
            stack.pop()
        current = stack[-1][1]
        if value == "":
            new_dict: Dict[str, Any] = {}
            current[key] = new_dict
            stack.append((indent + 2, new_dict))
            continue
        current[key] = _convert_scalar(value)
    return root


def _convert_scalar(value: str) -> Any:
    if value.startswith("[") and value.endswith("]"):
        try:
            return ast.literal_eval(value)
        except (ValueError, SyntaxError):  # pragma: no cover
            return value
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value.strip('"\'')

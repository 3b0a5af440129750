"""Dataclasses for the chart pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .palette import color_index


@dataclass
class PricePoint:
    """Single close sample; ``value`` is ``None`` when the provider skipped it."""

    value: Optional[float]
    timestamp: int


@dataclass
class PriceSeries:
    """Parallel close/timestamp sequences, oldest first."""

    values: List[Optional[float]] = field(default_factory=list)
    timestamps: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.values) != len(self.timestamps):
            raise ValueError(
                f"values and timestamps differ in length ({len(self.values)} != {len(self.timestamps)})"
            )

    def __len__(self) -> int:
        return len(self.values)

    def points(self) -> Iterator[PricePoint]:
        for value, timestamp in zip(self.values, self.timestamps):
            yield PricePoint(value=value, timestamp=timestamp)

    @property
    def is_sanitized(self) -> bool:
        return all(value is not None for value in self.values)

    @property
    def last_value(self) -> Optional[float]:
        return self.values[-1] if self.values else None

    @property
    def last_timestamp(self) -> Optional[int]:
        return self.timestamps[-1] if self.timestamps else None


@dataclass(frozen=True)
class RenderWindow:
    """Number of most recent sanitized points drawn in one pass."""

    count: int

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ValueError(f"Render window must hold at least one point, got {self.count}")

    @classmethod
    def for_series(cls, series_length: int, pixel_width: int) -> "RenderWindow":
        return cls(count=min(series_length, pixel_width))


@dataclass(frozen=True)
class ScaleContext:
    """Scale factors and price range for a single render pass."""

    x_scale: float
    y_scale: float
    min_price: float
    max_price: float


@dataclass(frozen=True)
class SessionBounds:
    """Regular trading session for the current day, in epoch seconds."""

    start: int
    end: int
    gmt_offset: int = 0


@dataclass
class ChartQuote:
    """Validated provider response for one symbol."""

    symbol: str
    currency: Optional[str]
    gmt_offset: int
    session: SessionBounds
    series: PriceSeries
    previous_close: Optional[float] = None
    exchange_timezone: Optional[str] = None


@dataclass(frozen=True)
class ChartStyle:
    """Immutable colors and layout constants, built once from configuration."""

    text_color: int = color_index("white")
    increase_color: int = color_index("lime")
    decrease_color: int = color_index("red")
    background_color: int = color_index("black")
    header_offset: int = 4
    lookback_factor: float = 1.5

    @classmethod
    def from_names(
        cls,
        text_color: str = "white",
        increase_color: str = "lime",
        decrease_color: str = "red",
        background_color: str = "black",
        header_offset: int = 4,
        lookback_factor: float = 1.5,
    ) -> "ChartStyle":
        return cls(
            text_color=color_index(text_color),
            increase_color=color_index(increase_color),
            decrease_color=color_index(decrease_color),
            background_color=color_index(background_color),
            header_offset=int(header_offset),
            lookback_factor=float(lookback_factor),
        )


@dataclass
class TextLine:
    """One line of text drawn over the top of the chart."""

    text: str
    color: int


@dataclass
class ChartSummary:
    """Text output of a render pass."""

    header: TextLine
    footer: TextLine
    last_price: float
    pct_change: Optional[float]
    market_open: bool

    @property
    def lines(self) -> List[TextLine]:
        return [self.header, self.footer]


@dataclass(frozen=True)
class StockSelection:
    """Symbol and query window chosen by the user."""

    symbol: str
    region: str
    interval: str
    range: str

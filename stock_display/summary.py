"""Textual header/footer shown above the chart."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from dateutil import tz

from .market import status_glyph
from .models import ChartQuote, ChartStyle, ChartSummary, PriceSeries, TextLine

CURRENCY_GLYPHS = {
    "USD": "$",
    "EUR": "€",
}

TIMESTAMP_FORMAT = "%d/%m %H:%M"


def currency_glyph(code: Optional[str]) -> str:
    if not code:
        return ""
    return CURRENCY_GLYPHS.get(code, code)


def percent_change(last_price: float, previous_close: Optional[float]) -> Optional[float]:
    """Percent move from ``previous_close``, rounded to 2 places; None when undefined."""
    if previous_close is None or previous_close == 0:
        return None
    change = round(last_price / previous_close * 100 - 100, 2)
    return change if change != 0 else 0.0


def resolve_previous_close(explicit: Optional[float], series: PriceSeries) -> Optional[float]:
    if explicit is not None:
        return explicit
    if len(series) >= 2:
        return series.values[-2]
    return None


def format_timestamp(timestamp: Optional[int], gmt_offset: int = 0) -> str:
    if timestamp is None:
        return ""
    local = datetime.fromtimestamp(timestamp, tz=tz.tzoffset(None, gmt_offset))
    return local.strftime(TIMESTAMP_FORMAT)


def format_change(pct: float) -> str:
    if pct >= 0:
        return f"+{pct:.2f}%"
    return f"{pct:.2f}%"


class SummaryFormatter:
    """Build the two summary lines for a render pass."""

    def __init__(self, style: ChartStyle) -> None:
        self.style = style

    def format(
        self,
        quote: ChartQuote,
        series: PriceSeries,
        last_price: float,
        market_open: bool,
        interval: str,
    ) -> ChartSummary:
        header_text = "{glyph}{symbol} {interval} {when}".format(
            glyph=status_glyph(market_open),
            symbol=quote.symbol,
            interval=interval,
            when=format_timestamp(series.last_timestamp, quote.gmt_offset),
        )

        previous_close = resolve_previous_close(quote.previous_close, series)
        pct = percent_change(last_price, previous_close)
        price_text = f"{last_price:.2f}{currency_glyph(quote.currency)}"
        if pct is None:
            footer = TextLine(text=f"{price_text} ", color=self.style.text_color)
        else:
            color = self.style.increase_color if pct >= 0 else self.style.decrease_color
            footer = TextLine(text=f"{price_text} {format_change(pct)}", color=color)

        return ChartSummary(
            header=TextLine(text=header_text, color=self.style.text_color),
            footer=footer,
            last_price=last_price,
            pct_change=pct,
            market_open=market_open,
        )

"""Poll loop tying the data source, chart pipeline and display together."""
from __future__ import annotations

import math
import random
import time
from typing import Callable, Dict, Optional, Tuple

import requests

from .charts import ChartRenderer
from .config_loader import AppConfig
from .data_provider import MarketDataProvider, ProviderConfig
from .display import BaseDisplay, PngDisplay, TerminalDisplay
from .exceptions import MissingDataError
from .market import MarketStatusEvaluator
from .models import ChartQuote, ChartStyle, ChartSummary, RenderWindow, StockSelection
from .scaling import compute_scale
from .series import sanitize_series
from .summary import SummaryFormatter
from .utils import setup_logger


class DisplayRunner:
    """Main orchestration class."""

    def __init__(
        self,
        style: ChartStyle,
        provider: MarketDataProvider,
        display: BaseDisplay,
        selection: StockSelection,
        clock=None,
        poll_range: Tuple[float, float] = (20.0, 60.0),
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.style = style
        self.provider = provider
        self.display = display
        self.selection = selection
        self.poll_range = poll_range
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.renderer = ChartRenderer(style)
        self.formatter = SummaryFormatter(style)
        self.market = MarketStatusEvaluator(clock)
        self.logger = setup_logger(__name__)

    def run_once(self) -> Optional[ChartSummary]:
        """Fetch and draw one update; data problems skip this pass only."""
        try:
            quote = self.provider.fetch_chart(self.selection)
            return self.render(quote)
        except MissingDataError as exc:
            self.logger.error("Skipping update for %s: %s", self.selection.symbol, exc)
        except requests.RequestException as exc:
            self.logger.error(
                "Failed to retrieve stock data for %s (%s, %s): %s",
                self.selection.symbol,
                self.selection.interval,
                self.selection.range,
                exc,
            )
        return None

    def render(self, quote: ChartQuote) -> ChartSummary:
        series = sanitize_series(quote.series)
        if len(series) == 0:
            raise MissingDataError(
                "No close values left after removing missing samples",
                {"symbol": quote.symbol},
            )
        window = RenderWindow.for_series(len(series), self.display.width)
        scale = compute_scale(
            series,
            window.count,
            self.display.width,
            self.display.rows,
            self.display.v_res,
            self.style.lookback_factor,
        )
        canvas = self.display.new_canvas()
        last_price = self.renderer.render(canvas, series, window, scale)
        market_open = self.market.evaluate(quote.session)
        summary = self.formatter.format(quote, series, last_price, market_open, self.selection.interval)
        self.display.present(canvas, summary.lines)
        return summary

    def run_forever(self, max_cycles: Optional[int] = None) -> int:
        """Redraw until interrupted, sleeping a random interval between polls."""
        cycles = 0
        try:
            while max_cycles is None or cycles < max_cycles:
                self.run_once()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                sleep_for = self.rng.uniform(*self.poll_range)
                self.logger.info("Sleeping for %ss until update", math.ceil(sleep_for))
                self.sleep(sleep_for)
        except KeyboardInterrupt:
            self.logger.info("Interrupted, stopping display loop")
        return cycles


def create_display(config: AppConfig, style: ChartStyle, png_path: Optional[str] = None) -> BaseDisplay:
    display_cfg = config.display
    target = "png" if png_path else display_cfg.get("target", "terminal")
    if target == "png":
        return PngDisplay(
            path=png_path or display_cfg.get("png_path", "charts/stock.png"),
            width=int(display_cfg.get("width", 164)),
            rows=int(display_cfg.get("rows", 40)),
            background=style.background_color,
            scale=int(display_cfg.get("png_scale", 4)),
        )
    if target != "terminal":
        raise ValueError(f"Unknown display target {target!r}")
    return TerminalDisplay.from_terminal(background=style.background_color)


def create_runner(
    config: AppConfig,
    env: Dict[str, Optional[str]],
    selection: StockSelection,
    png_path: Optional[str] = None,
    display: Optional[BaseDisplay] = None,
) -> DisplayRunner:
    source = config.data_source
    provider_config = ProviderConfig(
        base_url=source.get("base_url", "https://query1.finance.yahoo.com"),
        max_retries=int(source.get("max_retries", 3)),
        backoff_seconds=int(source.get("backoff_seconds", 1)),
        timeout_seconds=int(source.get("timeout_seconds", 30)),
        cache_path=source.get("cache_path"),
    )
    use_sample = source.get("provider", "yahoo") == "sample" or env.get("STOCK_DISPLAY_SAMPLE") == "1"
    provider = MarketDataProvider(provider_config, use_sample=use_sample)
    style = config.chart_style()
    if display is None:
        display = create_display(config, style, png_path)
    return DisplayRunner(
        style=style,
        provider=provider,
        display=display,
        selection=selection,
        poll_range=config.polling_range(),
    )

"""Market data provider implementations."""
from __future__ import annotations

import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .exceptions import MissingDataError
from .models import ChartQuote, PriceSeries, SessionBounds, StockSelection
from .utils import save_json, setup_logger

INTERVAL_SECONDS: Dict[str, int] = {
    "1m": 60,
    "2m": 120,
    "5m": 300,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "1d": 86400,
    "1mo": 30 * 86400,
}


@dataclass
class ProviderConfig:
    base_url: str = "https://query1.finance.yahoo.com"
    max_retries: int = 3
    backoff_seconds: int = 1
    timeout_seconds: int = 30
    cache_path: Optional[str] = None


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_chart_payload(payload: Dict[str, Any]) -> ChartQuote:
    """Validate a Yahoo chart response and convert it to a ``ChartQuote``."""

    chart = payload.get("chart") if isinstance(payload, dict) else None
    if not chart:
        raise MissingDataError("No 'chart' data found in response")
    results = chart.get("result") or []
    if not results:
        error = chart.get("error") or {}
        raise MissingDataError(
            "Chart response holds no result",
            {"code": error.get("code"), "description": error.get("description")},
        )
    result = results[0]
    meta = result.get("meta") or {}

    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = quotes[0].get("close")
    if not closes:
        raise MissingDataError(
            "Can't find close values, parameters selection must be bad",
            {"symbol": meta.get("symbol")},
        )
    timestamps = result.get("timestamp") or []
    try:
        series = PriceSeries(
            values=[_optional_float(value) for value in closes],
            timestamps=[int(ts) for ts in timestamps],
        )
    except ValueError as exc:
        raise MissingDataError("Close values and timestamps do not line up", {"error": str(exc)}) from exc

    gmt_offset = int(meta.get("gmtoffset") or 0)
    regular = (meta.get("currentTradingPeriod") or {}).get("regular") or {}
    session = SessionBounds(
        start=int(regular.get("start") or 0),
        end=int(regular.get("end") or 0),
        gmt_offset=gmt_offset,
    )
    return ChartQuote(
        symbol=str(meta.get("symbol") or ""),
        currency=meta.get("currency"),
        gmt_offset=gmt_offset,
        session=session,
        series=series,
        previous_close=_optional_float(meta.get("previousClose")),
        exchange_timezone=meta.get("exchangeTimezoneName"),
    )


class MarketDataProvider:
    """Facade that chooses between live and sample backends."""

    def __init__(self, config: ProviderConfig, use_sample: bool = False) -> None:
        self.logger = setup_logger(__name__)
        self.use_sample = use_sample
        if use_sample:
            self.backend: BaseBackend = SampleBackend()
            self.logger.warning("Using sample data backend; no network requests will be made.")
        else:
            self.backend = YahooChartBackend(config)

    def fetch_chart(self, selection: StockSelection) -> ChartQuote:
        return self.backend.fetch_chart(selection)


class BaseBackend:
    """Base backend interface."""

    def fetch_chart(self, selection: StockSelection) -> ChartQuote:
        raise NotImplementedError


class YahooChartBackend(BaseBackend):
    """Yahoo Finance chart endpoint."""

    def __init__(self, config: ProviderConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.logger = setup_logger(__name__)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "Mozilla/5.0 (stock-display)"})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.config.base_url}{path}"
        delay = max(self.config.backoff_seconds, 1)
        for attempt in range(self.config.max_retries + 1):
            response = self.session.get(url, params=params, timeout=self.config.timeout_seconds)
            status = response.status_code
            if status in {429, 500, 502, 503, 504}:
                sleep_for = delay * (2**attempt)
                self.logger.debug("Yahoo returned %s, retrying in %.1fs", status, sleep_for)
                time.sleep(sleep_for + random.uniform(0, 0.5))
                continue
            if status >= 400:
                self.logger.error("Yahoo API error %s: %s", status, response.text[:200])
                response.raise_for_status()
            try:
                return response.json()
            except ValueError as exc:
                raise MissingDataError("Failed to parse JSON response") from exc
        raise requests.HTTPError(f"Yahoo API request failed after {self.config.max_retries} retries")

    def fetch_chart(self, selection: StockSelection) -> ChartQuote:
        self.logger.info("Getting stock data for %s", selection.symbol)
        params = {
            "region": selection.region,
            "lang": "en-US",
            "includePrePost": "false",
            "interval": selection.interval,
            "useYfid": "true",
            "range": selection.range,
            "corsDomain": "finance.yahoo.com",
            ".tsrc": "finance",
        }
        payload = self._get(f"/v8/finance/chart/{selection.symbol}", params=params)
        if self.config.cache_path:
            save_json(Path(self.config.cache_path), payload)
            self.logger.debug("Saved updated data to %s", self.config.cache_path)
        return parse_chart_payload(payload)


class SampleBackend(BaseBackend):
    """Generate deterministic sample data suitable for tests and dry runs."""

    def __init__(self, seed: int = 42, points: int = 390, now: Optional[int] = None) -> None:
        self.logger = setup_logger(__name__)
        self._seed = seed
        self._points = points
        self._now = now

    def fetch_chart(self, selection: StockSelection) -> ChartQuote:
        rng = random.Random(f"{self._seed}:{selection.symbol}")
        step = INTERVAL_SECONDS.get(selection.interval, 60)
        end = self._now if self._now is not None else int(time.time())
        end -= end % step
        timestamps = [end - step * (self._points - 1 - idx) for idx in range(self._points)]
        values = self._generate_closes(rng, 100.0 + rng.uniform(-50, 50))
        session = SessionBounds(start=end - 23400, end=end + step, gmt_offset=0)
        return ChartQuote(
            symbol=selection.symbol,
            currency="USD" if selection.region == "US" else "EUR",
            gmt_offset=0,
            session=session,
            series=PriceSeries(values=values, timestamps=timestamps),
            previous_close=None,
        )

    def _generate_closes(self, rng: random.Random, start_price: float) -> List[Optional[float]]:
        closes: List[Optional[float]] = []
        current = start_price
        for idx in range(self._points):
            current *= max(0.1, 1 + rng.gauss(0.0, 0.004))
            # the live feed drops samples now and then
            if idx and rng.random() < 0.03:
                closes.append(None)
                continue
            closes.append(round(current, 2))
        return closes

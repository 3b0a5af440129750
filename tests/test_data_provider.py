"""Unit tests for the market data provider."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from stock_display.data_provider import (
    MarketDataProvider,
    ProviderConfig,
    SampleBackend,
    YahooChartBackend,
    parse_chart_payload,
)
from stock_display.exceptions import MissingDataError
from stock_display.models import StockSelection

SELECTION = StockSelection(symbol="AAPL", region="US", interval="5m", range="5d")


def _payload(closes: Optional[List[Any]], timestamps: List[int], **meta: Any) -> Dict[str, Any]:
    base_meta = {
        "symbol": "AAPL",
        "currency": "USD",
        "gmtoffset": -14400,
        "exchangeTimezoneName": "America/New_York",
        "currentTradingPeriod": {"regular": {"start": 1000, "end": 2000, "gmtoffset": -14400}},
    }
    base_meta.update(meta)
    quote = {} if closes is None else {"close": closes}
    return {
        "chart": {
            "result": [
                {"meta": base_meta, "timestamp": timestamps, "indicators": {"quote": [quote]}}
            ],
            "error": None,
        }
    }


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self) -> None:
        raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses: List[FakeResponse]) -> None:
        self.headers: Dict[str, str] = {}
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params=None, timeout=None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return self.responses.pop(0)


def test_parse_payload_keeps_missing_samples_and_meta() -> None:
    quote = parse_chart_payload(_payload([1.5, None, 2.5], [10, 20, 30], previousClose=1.25))
    assert quote.symbol == "AAPL"
    assert quote.currency == "USD"
    assert quote.previous_close == 1.25
    assert quote.gmt_offset == -14400
    assert quote.session.start == 1000
    assert quote.session.end == 2000
    assert quote.session.gmt_offset == -14400
    assert quote.exchange_timezone == "America/New_York"
    assert quote.series.values == [1.5, None, 2.5]
    assert quote.series.timestamps == [10, 20, 30]


def test_parse_payload_without_previous_close() -> None:
    quote = parse_chart_payload(_payload([1.0], [10]))
    assert quote.previous_close is None


def test_parse_payload_missing_data_errors() -> None:
    with pytest.raises(MissingDataError):
        parse_chart_payload({})
    with pytest.raises(MissingDataError):
        parse_chart_payload({"chart": {"result": [], "error": {"code": "Not Found"}}})
    with pytest.raises(MissingDataError):
        parse_chart_payload(_payload(None, [10]))
    with pytest.raises(MissingDataError):
        parse_chart_payload(_payload([1.0, 2.0], [10]))


def test_yahoo_backend_requests_chart_and_caches(tmp_path) -> None:
    payload = _payload([1.0, 2.0], [10, 20])
    session = FakeSession([FakeResponse(200, payload)])
    cache_path = tmp_path / "stock_data.json"
    config = ProviderConfig(base_url="https://example.test", cache_path=str(cache_path))
    backend = YahooChartBackend(config, session=session)

    quote = backend.fetch_chart(SELECTION)

    assert quote.series.values == [1.0, 2.0]
    call = session.calls[0]
    assert call["url"] == "https://example.test/v8/finance/chart/AAPL"
    assert call["params"]["interval"] == "5m"
    assert call["params"]["range"] == "5d"
    assert call["params"]["region"] == "US"
    assert "User-Agent" in session.headers
    assert json.loads(cache_path.read_text(encoding="utf-8")) == payload


def test_yahoo_backend_retries_rate_limits(monkeypatch) -> None:
    monkeypatch.setattr("stock_display.data_provider.time.sleep", lambda _: None)
    session = FakeSession([FakeResponse(429), FakeResponse(503), FakeResponse(200, _payload([3.0], [10]))])
    backend = YahooChartBackend(ProviderConfig(max_retries=3), session=session)
    assert backend.fetch_chart(SELECTION).series.values == [3.0]
    assert len(session.calls) == 3


def test_yahoo_backend_raises_on_client_error() -> None:
    session = FakeSession([FakeResponse(404, {"chart": None})])
    backend = YahooChartBackend(ProviderConfig(), session=session)
    with pytest.raises(requests.HTTPError):
        backend.fetch_chart(SELECTION)


def test_sample_backend_is_deterministic_and_gappy() -> None:
    backend = SampleBackend(now=1_700_000_100)
    first = backend.fetch_chart(SELECTION)
    second = backend.fetch_chart(SELECTION)
    assert first.series.values == second.series.values
    assert len(first.series) == 390
    assert any(value is None for value in first.series.values)
    assert first.series.values[0] is not None
    deltas = {b - a for a, b in zip(first.series.timestamps, first.series.timestamps[1:])}
    assert deltas == {300}


def test_provider_facade_uses_sample_backend() -> None:
    provider = MarketDataProvider(ProviderConfig(), use_sample=True)
    assert isinstance(provider.backend, SampleBackend)
    assert provider.fetch_chart(SELECTION).symbol == "AAPL"

"""Market data endpoints and decoders for kline replies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .client import ClientRequest, ServerResponse


@dataclass(frozen=True)
class KlineCandle:
    """One traded-price candle: prices, volume and turnover as sent by the API."""

    start_time: str
    open_price: str
    high_price: str
    low_price: str
    close_price: str
    volume: str
    turnover: str


@dataclass(frozen=True)
class PriceKlineCandle:
    """One mark, index or premium-index price candle."""

    start_time: str
    open_price: str
    high_price: str
    low_price: str
    close_price: str


@dataclass
class KlineResponse:
    """Decoded reply of the traded-price kline endpoint."""

    category: str = ""
    symbol: str = ""
    candles: list[KlineCandle] = field(default_factory=list)


@dataclass
class PriceKlineResponse:
    """Decoded reply of the mark, index and premium-index kline endpoints."""

    category: str = ""
    symbol: str = ""
    candles: list[PriceKlineCandle] = field(default_factory=list)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _load_result(data: bytes | str) -> tuple[str, str, list[Any]]:
    payload = json.loads(data)
    result = payload.get("result") if isinstance(payload, dict) else None
    if not isinstance(result, dict):
        result = {}
    rows = result.get("list")
    if not isinstance(rows, list):
        rows = []
    return _as_str(result.get("category")), _as_str(result.get("symbol")), rows


def _rows(rows: list[Any], width: int) -> list[list[str]]:
    fields = []
    for row in rows:
        if not isinstance(row, list) or len(row) < width:
            raise ValueError("invalid kline response")
        fields.append([_as_str(value) for value in row[:width]])
    return fields


def parse_market_kline(data: bytes | str) -> KlineResponse:
    """Decode a traded-price kline reply; every row needs seven fields."""
    category, symbol, rows = _load_result(data)
    candles = [KlineCandle(*values) for values in _rows(rows, 7)]
    return KlineResponse(category=category, symbol=symbol, candles=candles)


def _parse_price_kline(data: bytes | str) -> PriceKlineResponse:
    category, symbol, rows = _load_result(data)
    candles = [PriceKlineCandle(*values) for values in _rows(rows, 5)]
    return PriceKlineResponse(category=category, symbol=symbol, candles=candles)


def parse_mark_price_kline(data: bytes | str) -> PriceKlineResponse:
    """Decode a mark-price kline reply; every row needs five fields."""
    return _parse_price_kline(data)


def parse_index_price_kline(data: bytes | str) -> PriceKlineResponse:
    """Decode an index-price kline reply; every row needs five fields."""
    return _parse_price_kline(data)


def parse_premium_index_kline(data: bytes | str) -> PriceKlineResponse:
    """Decode a premium-index kline reply; every row needs five fields."""
    return _parse_price_kline(data)


class MarketEndpoints(ClientRequest):
    """Public market data; these requests are not signed."""

    def _public(self, endpoint: str) -> ServerResponse:
        return self._send("GET", endpoint, signed=False)

    def get_server_time(self) -> ServerResponse:
        return self._public("/v5/market/time")

    def get_market_kline(self) -> ServerResponse:
        return self._public("/v5/market/kline")

    def get_mark_price_kline(self) -> ServerResponse:
        return self._public("/v5/market/mark-price-kline")

    def get_index_price_kline(self) -> ServerResponse:
        return self._public("/v5/market/mark-price-kline")

    def get_premium_index_price_kline(self) -> ServerResponse:
        return self._public("/v5/market/mark-price-kline")

    def get_instrument_info(self) -> ServerResponse:
        return self._public("/v5/market/instruments-info")

    def get_order_book_info(self) -> ServerResponse:
        return self._public("/v5/market/orderbook")

    def get_market_tickers(self) -> ServerResponse:
        return self._public("/v5/market/tickers")

    def get_funding_rate_history(self) -> ServerResponse:
        return self._public("/v5/market/funding/history")

    def get_public_recent_trades(self) -> ServerResponse:
        return self._public("/v5/market/recent-trade")

    def get_open_interests(self) -> ServerResponse:
        return self._public("/v5/market/open-interest")

    def get_history_volatility(self) -> ServerResponse:
        return self._public("/v5/market/historical-volatility")

    def get_market_insurance(self) -> ServerResponse:
        return self._public("/v5/market/insurance")

    def get_market_risk_limits(self) -> ServerResponse:
        return self._public("/v5/market/risk-limit")

    def get_delivery_price(self) -> ServerResponse:
        return self._public("/v5/market/delivery-price")

    def get_long_short_ratio(self) -> ServerResponse:
        return self._public("/v5/market/account-ratio")
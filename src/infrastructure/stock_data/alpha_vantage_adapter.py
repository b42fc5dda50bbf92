"""
Infrastructure adapter: Alpha Vantage REST API → IStockDataProvider.
All Alpha Vantage payload quirks ("01. symbol", "4. close", rate-limit notes)
are confined here; the rest of the codebase depends only on IStockDataProvider.
"""

import logging
from typing import Any, Optional

import httpx

from src.domain.entities.stock_price import CompanyInfo, PricePoint, StockQuote, SymbolMatch
from src.domain.errors import MarketDataError
from src.domain.ports.stock_data_port import IStockDataProvider
from src.infrastructure.stock_data.request_spacer import RequestSpacer, market_data_spacer

logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co/query"

# Keys Alpha Vantage uses to report throttling or bad requests with HTTP 200.
_PROVIDER_MESSAGE_KEYS = ("Information", "Note", "Error Message")


class AlphaVantageStockDataProvider(IStockDataProvider):
    """Fetches quotes, daily series, overviews and symbol matches from Alpha Vantage."""

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.Client] = None,
        spacer: RequestSpacer = market_data_spacer,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)
        self._spacer = spacer

    def search_symbols(self, query: str) -> list[SymbolMatch]:
        data = self._query("SYMBOL_SEARCH", keywords=query)
        return [
            SymbolMatch(
                symbol=match.get("1. symbol", ""),
                name=match.get("2. name", ""),
                type=match.get("3. type", ""),
                region=match.get("4. region", ""),
            )
            for match in data.get("bestMatches", [])
        ]

    def get_quote(self, symbol: str) -> StockQuote:
        data = self._query("GLOBAL_QUOTE", symbol=symbol.upper())
        quote = data.get("Global Quote") or {}
        if not quote:
            raise MarketDataError(f"No quote data found for symbol: {symbol!r}")
        try:
            return StockQuote(
                symbol=quote["01. symbol"],
                current_price=float(quote["05. price"]),
                change=float(quote["09. change"]),
                change_percent=float(quote["10. change percent"].rstrip("%")),
                volume=int(quote["06. volume"]),
                previous_close=float(quote["08. previous close"]),
            )
        except (KeyError, ValueError) as exc:
            raise MarketDataError(f"Malformed quote for {symbol!r}: {exc}") from exc

    def get_historical_prices(
        self,
        symbol: str,
        output_size: str = "compact",
    ) -> list[PricePoint]:
        """Daily bars, oldest first. compact = last 100 days, full = 20+ years."""
        data = self._query("TIME_SERIES_DAILY", symbol=symbol.upper(), outputsize=output_size)
        series = data.get("Time Series (Daily)")
        if not series:
            raise MarketDataError(f"No historical data available for symbol: {symbol!r}")
        try:
            points = [
                PricePoint(
                    date=date,
                    open=float(values["1. open"]),
                    high=float(values["2. high"]),
                    low=float(values["3. low"]),
                    close=float(values["4. close"]),
                    volume=int(values["5. volume"]),
                )
                for date, values in series.items()
            ]
        except (KeyError, ValueError) as exc:
            raise MarketDataError(f"Malformed daily series for {symbol!r}: {exc}") from exc
        return sorted(points, key=lambda point: point.date)

    def get_company_overview(self, symbol: str) -> Optional[CompanyInfo]:
        data = self._query("OVERVIEW", symbol=symbol.upper())
        if not data:
            return None
        return CompanyInfo.from_overview(data)

    def _query(self, function: str, **params: Any) -> dict:
        if not self._api_key:
            raise MarketDataError("ALPHA_VANTAGE_API_KEY is not configured")
        with self._spacer.lease():
            try:
                response = self._client.get(
                    BASE_URL,
                    params={"function": function, "apikey": self._api_key, **params},
                )
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise MarketDataError(f"Alpha Vantage {function} request failed: {exc}") from exc

        if not isinstance(data, dict):
            raise MarketDataError(f"Unexpected Alpha Vantage {function} payload")
        for key in _PROVIDER_MESSAGE_KEYS:
            if key in data:
                logger.error("Alpha Vantage %s refused: %s", function, data[key])
                raise MarketDataError(f"Alpha Vantage: {data[key]}")
        return data

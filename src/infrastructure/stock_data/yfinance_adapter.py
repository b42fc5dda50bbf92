"""
Infrastructure adapter: yfinance → IStockDataProvider.
All yfinance-specific details (Search, fast_info, history(), info) are confined here;
the rest of the codebase depends only on IStockDataProvider.
"""

from typing import Optional

import yfinance as yf

from src.domain.entities.stock_price import CompanyInfo, PricePoint, StockQuote, SymbolMatch
from src.domain.errors import MarketDataError
from src.domain.ports.stock_data_port import IStockDataProvider

# Alpha Vantage output sizes mapped onto yfinance periods.
_PERIODS = {"compact": "6mo", "full": "max"}


class YFinanceStockDataProvider(IStockDataProvider):
    """Fetches stock market data from Yahoo Finance via the yfinance library."""

    def search_symbols(self, query: str) -> list[SymbolMatch]:
        try:
            quotes = yf.Search(query, max_results=10).quotes
        except Exception as exc:
            raise MarketDataError(f"Yahoo symbol search failed: {exc}") from exc
        return [
            SymbolMatch(
                symbol=item.get("symbol", ""),
                name=item.get("longname") or item.get("shortname") or "",
                type=item.get("quoteType", ""),
                region=item.get("exchange", ""),
            )
            for item in quotes
            if item.get("symbol")
        ]

    def get_quote(self, symbol: str) -> StockQuote:
        fast_info = yf.Ticker(symbol).fast_info
        current_price = getattr(fast_info, "last_price", None)
        previous_close = getattr(fast_info, "previous_close", None)
        if current_price is None or previous_close is None:
            raise MarketDataError(f"No price data available for symbol: {symbol!r}")

        change = float(current_price) - float(previous_close)
        return StockQuote(
            symbol=symbol,
            current_price=round(float(current_price), 4),
            change=round(change, 4),
            change_percent=round(change / float(previous_close) * 100, 4),
            volume=int(getattr(fast_info, "last_volume", 0) or 0),
            previous_close=round(float(previous_close), 4),
        )

    def get_historical_prices(
        self,
        symbol: str,
        output_size: str = "compact",
    ) -> list[PricePoint]:
        history = yf.Ticker(symbol).history(
            period=_PERIODS.get(output_size, "6mo"), interval="1d"
        )
        if history.empty:
            raise MarketDataError(f"No historical data available for symbol: {symbol!r}")

        return [
            PricePoint(
                date=date.strftime("%Y-%m-%d"),
                open=round(float(row["Open"]), 4),
                high=round(float(row["High"]), 4),
                low=round(float(row["Low"]), 4),
                close=round(float(row["Close"]), 4),
                volume=int(row["Volume"]),
            )
            for date, row in history.iterrows()
        ]

    def get_company_overview(self, symbol: str) -> Optional[CompanyInfo]:
        info = yf.Ticker(symbol).info
        if not info:
            return None
        return CompanyInfo(
            name=info.get("longName") or info.get("shortName"),
            sector=info.get("sector"),
            market_capitalization=(
                str(info["marketCap"]) if info.get("marketCap") else None
            ),
        )

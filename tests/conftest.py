"""Pytest configuration and fixtures."""

from datetime import date, timedelta
from typing import Optional, Sequence

import pytest

from src.domain.entities.stock_price import CompanyInfo, PricePoint, StockQuote, SymbolMatch
from src.domain.errors import LanguageModelError, MarketDataError
from src.domain.ports.llm_port import ILanguageModel
from src.domain.ports.stock_data_port import IStockDataProvider


def make_series(closes: Sequence[float], start: date = date(2024, 1, 1)) -> list[PricePoint]:
    """Daily PricePoints with the given closes, oldest first."""
    return [
        PricePoint(
            date=(start + timedelta(days=i)).isoformat(),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=1_000_000,
        )
        for i, close in enumerate(closes)
    ]


class FakeLanguageModel(ILanguageModel):
    """Returns a canned reply or raises a canned error; records prompts."""

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeStockDataProvider(IStockDataProvider):
    def __init__(
        self,
        quote: Optional[StockQuote] = None,
        history: Optional[list[PricePoint]] = None,
        company: Optional[CompanyInfo] = None,
        matches: Optional[list[SymbolMatch]] = None,
        history_error: bool = False,
        overview_error: bool = False,
    ) -> None:
        self.quote = quote
        self.history = history or []
        self.company = company
        self.matches = matches or []
        self.history_error = history_error
        self.overview_error = overview_error
        self.calls: list[tuple[str, str]] = []

    def search_symbols(self, query: str) -> list[SymbolMatch]:
        self.calls.append(("search", query))
        return self.matches

    def get_quote(self, symbol: str) -> StockQuote:
        self.calls.append(("quote", symbol))
        if self.quote is None:
            raise MarketDataError(f"No quote data found for symbol: {symbol!r}")
        return self.quote

    def get_historical_prices(self, symbol: str, output_size: str = "compact") -> list[PricePoint]:
        self.calls.append(("history", symbol))
        if self.history_error:
            raise MarketDataError("rate limited")
        return self.history

    def get_company_overview(self, symbol: str) -> Optional[CompanyInfo]:
        self.calls.append(("overview", symbol))
        if self.overview_error:
            raise MarketDataError("rate limited")
        return self.company


@pytest.fixture
def uptrend_history() -> list[PricePoint]:
    """30 closes: ten at 100 then twenty at 105 (SMA-20 = 105, first close = 100)."""
    return make_series([100.0] * 10 + [105.0] * 20)


@pytest.fixture
def volatile_history() -> list[PricePoint]:
    """Alternating closes with roughly 10% daily swings."""
    return make_series([100.0 if i % 2 == 0 else 110.0 for i in range(30)])


@pytest.fixture
def failing_llm() -> FakeLanguageModel:
    return FakeLanguageModel(error=LanguageModelError("upstream unavailable"))


@pytest.fixture
def sample_quote() -> StockQuote:
    return StockQuote(
        symbol="AAPL",
        current_price=110.0,
        change=1.5,
        change_percent=1.38,
        volume=52_000_000,
        previous_close=108.5,
    )

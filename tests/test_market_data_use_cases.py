"""Tests for the snapshot and symbol-search use-cases."""

import pytest

from src.application.use_cases.get_stock_snapshot import GetStockSnapshotUseCase
from src.application.use_cases.search_symbols import SearchSymbolsUseCase
from src.domain.entities.stock_price import CompanyInfo, SymbolMatch
from src.domain.errors import MarketDataError
from tests.conftest import FakeStockDataProvider, make_series


class FailingSearchProvider(FakeStockDataProvider):
    def search_symbols(self, query: str):
        raise MarketDataError("rate limited")


class TestGetStockSnapshot:
    def test_collects_quote_history_and_company(self, sample_quote) -> None:
        history = make_series([100.0, 101.0])
        company = CompanyInfo(name="Apple Inc")
        provider = FakeStockDataProvider(quote=sample_quote, history=history, company=company)

        snapshot = GetStockSnapshotUseCase(provider).execute("  aapl ")

        assert snapshot.quote == sample_quote
        assert snapshot.historical_data == history
        assert snapshot.company == company
        assert [call[1] for call in provider.calls] == ["AAPL", "AAPL", "AAPL"]

    def test_missing_quote_propagates(self) -> None:
        with pytest.raises(MarketDataError):
            GetStockSnapshotUseCase(FakeStockDataProvider()).execute("NOPE")

    def test_history_and_overview_failures_degrade(self, sample_quote) -> None:
        provider = FakeStockDataProvider(quote=sample_quote, history_error=True, overview_error=True)

        snapshot = GetStockSnapshotUseCase(provider).execute("AAPL")

        assert snapshot.historical_data == []
        assert snapshot.company is None

    def test_blank_symbol_rejected(self) -> None:
        with pytest.raises(ValueError):
            GetStockSnapshotUseCase(FakeStockDataProvider()).execute("  ")


class TestSearchSymbols:
    def test_returns_matches(self) -> None:
        match = SymbolMatch(symbol="AAPL", name="Apple Inc", type="Equity", region="United States")
        provider = FakeStockDataProvider(matches=[match])

        assert SearchSymbolsUseCase(provider).execute(" apple ") == [match]
        assert provider.calls == [("search", "apple")]

    def test_short_query_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 2 characters"):
            SearchSymbolsUseCase(FakeStockDataProvider()).execute("a")

    def test_provider_failure_returns_empty(self) -> None:
        assert SearchSymbolsUseCase(FailingSearchProvider()).execute("apple") == []

"""
Port (interface) for stock data providers.
Infrastructure adapters (e.g. AlphaVantageStockDataProvider) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.stock_price import CompanyInfo, PricePoint, StockQuote, SymbolMatch


class IStockDataProvider(ABC):
    @abstractmethod
    def search_symbols(self, query: str) -> list[SymbolMatch]: ...

    @abstractmethod
    def get_quote(self, symbol: str) -> StockQuote: ...

    @abstractmethod
    def get_historical_prices(
        self,
        symbol: str,
        output_size: str = "compact",
    ) -> list[PricePoint]: ...

    @abstractmethod
    def get_company_overview(self, symbol: str) -> Optional[CompanyInfo]: ...

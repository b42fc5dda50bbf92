"""
Use-case: look up ticker symbols by company name or partial symbol.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging

from src.domain.entities.stock_price import SymbolMatch
from src.domain.errors import MarketDataError
from src.domain.ports.stock_data_port import IStockDataProvider

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class SearchSymbolsUseCase:
    def __init__(self, provider: IStockDataProvider) -> None:
        self._provider = provider

    def execute(self, query: str) -> list[SymbolMatch]:
        """Return provider matches for *query*, or [] if the provider fails.

        Raises:
            ValueError: if *query* is shorter than 2 characters.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise ValueError(f"Query must be at least {MIN_QUERY_LENGTH} characters")
        try:
            return self._provider.search_symbols(query)
        except MarketDataError as exc:
            logger.warning("Symbol search for %r failed: %s", query, exc)
            return []

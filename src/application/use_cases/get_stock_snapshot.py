"""
Use-case: gather quote, daily history and company overview for a symbol.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging

from src.domain.entities.stock_price import StockSnapshot
from src.domain.errors import MarketDataError
from src.domain.ports.stock_data_port import IStockDataProvider

logger = logging.getLogger(__name__)


class GetStockSnapshotUseCase:
    def __init__(self, provider: IStockDataProvider) -> None:
        self._provider = provider

    def execute(self, symbol: str, output_size: str = "compact") -> StockSnapshot:
        """Fetch everything the UI needs for *symbol* (uppercased).

        The quote is mandatory; history and overview degrade to empty values
        so a partially rate-limited lookup still renders.

        Raises:
            ValueError: if *symbol* is blank.
            MarketDataError: if the quote cannot be retrieved.
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        symbol = symbol.upper().strip()

        quote = self._provider.get_quote(symbol)

        try:
            history = self._provider.get_historical_prices(symbol, output_size=output_size)
        except MarketDataError as exc:
            logger.warning("Historical data unavailable for %s: %s", symbol, exc)
            history = []

        try:
            company = self._provider.get_company_overview(symbol)
        except MarketDataError as exc:
            logger.warning("Company overview unavailable for %s: %s", symbol, exc)
            company = None

        return StockSnapshot(quote=quote, historical_data=history, company=company)

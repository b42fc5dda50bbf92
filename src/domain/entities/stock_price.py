"""
Domain entities for market data.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class StockQuote:
    symbol: str
    current_price: float
    change: float
    change_percent: float
    volume: int
    previous_close: float


@dataclass(frozen=True)
class PricePoint:
    """One daily OHLCV bar. Series are ordered ascending by ISO date."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class CompanyInfo:
    name: Optional[str] = None
    sector: Optional[str] = None
    market_capitalization: Optional[str] = None

    @classmethod
    def from_overview(cls, overview: dict) -> "CompanyInfo":
        """Build from a provider overview keyed Name / Sector / MarketCapitalization."""
        return cls(
            name=overview.get("Name") or None,
            sector=overview.get("Sector") or None,
            market_capitalization=(
                str(overview["MarketCapitalization"])
                if overview.get("MarketCapitalization")
                else None
            ),
        )


@dataclass(frozen=True)
class SymbolMatch:
    symbol: str
    name: str
    type: str
    region: str


@dataclass(frozen=True)
class StockSnapshot:
    quote: StockQuote
    historical_data: list[PricePoint] = field(default_factory=list)
    company: Optional[CompanyInfo] = None

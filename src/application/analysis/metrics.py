"""Price-series metrics used by every analysis tier."""

from typing import Sequence

import pandas as pd

from src.domain.entities.analysis import RiskLevel
from src.domain.errors import InsufficientPriceHistoryError

HIGH_RISK_VOLATILITY = 5.0
LOW_RISK_VOLATILITY = 2.0


def _to_series(prices: Sequence[float]) -> pd.Series:
    series = pd.Series(list(prices), dtype="float64")
    if (series <= 0).any():
        raise ValueError("prices must be positive")
    return series


def daily_returns(prices: Sequence[float]) -> pd.Series:
    """Day-over-day percentage returns (length n - 1)."""
    series = _to_series(prices)
    return (series / series.shift(1) - 1).dropna() * 100


def volatility(prices: Sequence[float]) -> float:
    """
    Population standard deviation of daily percentage returns.

    Fewer than about 5 prices gives no meaningful volatility signal; two prices
    yield a single return and therefore 0.0.

    Args:
        prices: Closing prices, oldest first

    Returns:
        Volatility in percent

    Raises:
        InsufficientPriceHistoryError: fewer than 2 prices
        ValueError: any price is zero or negative
    """
    if len(prices) < 2:
        raise InsufficientPriceHistoryError(
            f"volatility needs at least 2 prices, got {len(prices)}"
        )
    return float(daily_returns(prices).std(ddof=0))


def simple_moving_average(prices: Sequence[float], period: int) -> float:
    """
    Mean of the last ``min(period, len(prices))`` prices.

    The period is only a ceiling: a short series is averaged in full.
    """
    if period < 1:
        raise ValueError("period must be positive")
    if len(prices) == 0:
        raise ValueError("cannot average an empty price series")
    return float(pd.Series(list(prices), dtype="float64").tail(period).mean())


def price_change_percent(current_price: float, base_price: float) -> float:
    if base_price <= 0:
        raise ValueError("base price must be positive")
    return (current_price - base_price) / base_price * 100


def risk_level_for(volatility_pct: float) -> RiskLevel:
    if volatility_pct > HIGH_RISK_VOLATILITY:
        return RiskLevel.HIGH
    if volatility_pct < LOW_RISK_VOLATILITY:
        return RiskLevel.LOW
    return RiskLevel.MEDIUM

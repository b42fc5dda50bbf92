"""
Deterministic technical analysis: the offline last line of defense when the
language model is unavailable. Depends only on the metrics module.
"""

from typing import Sequence

from src.application.analysis import metrics
from src.domain.entities.analysis import AnalysisResult, Recommendation
from src.domain.entities.stock_price import PricePoint

LOOKBACK_DAYS = 30
SMA_PERIOD = 20
TREND_THRESHOLD_PCT = 5.0

BUY_CONFIDENCE = 65
SELL_CONFIDENCE = 60
HOLD_CONFIDENCE = 50


def recent_closes(historical_data: Sequence[PricePoint], days: int = LOOKBACK_DAYS) -> list[float]:
    """Closing prices of the last *days* points, oldest first."""
    return [point.close for point in historical_data[-days:]]


class TechnicalAnalyzer:
    """Rule-based BUY/HOLD/SELL from the 30-day change, SMA-20 and volatility."""

    def analyze(
        self,
        symbol: str,
        current_price: float,
        historical_data: Sequence[PricePoint],
    ) -> AnalysisResult:
        closes = recent_closes(historical_data)
        change = metrics.price_change_percent(current_price, closes[0])
        vol = metrics.volatility(closes)
        sma20 = metrics.simple_moving_average(closes, SMA_PERIOD)

        if current_price > sma20 and change > TREND_THRESHOLD_PCT:
            recommendation, confidence = Recommendation.BUY, BUY_CONFIDENCE
        elif current_price < sma20 and change < -TREND_THRESHOLD_PCT:
            recommendation, confidence = Recommendation.SELL, SELL_CONFIDENCE
        else:
            recommendation, confidence = Recommendation.HOLD, HOLD_CONFIDENCE

        risk = metrics.risk_level_for(vol)

        analysis = (
            f"Technical analysis for {symbol}:\n\n"
            f"The stock is currently trading at ${current_price:.2f}, showing a "
            f"{change:.2f}% change over the past 30 days. The 20-day simple moving "
            f"average is at ${sma20:.2f}.\n\n"
            f"Risk Assessment: {risk.value} risk based on {vol:.2f}% volatility.\n\n"
            "This analysis is based on technical indicators and historical price "
            "movements. Always conduct thorough research and consult with financial "
            "advisors before making investment decisions."
        )

        return AnalysisResult(
            analysis=analysis,
            recommendation=recommendation,
            confidence=confidence,
            risk_level=risk,
            key_points=(
                f"Current price: ${current_price:.2f}",
                f"30-day change: {change:.2f}%",
                f"20-day SMA: ${sma20:.2f}",
                f"Volatility: {vol:.2f}% ({risk.value} risk)",
                f"Recommendation: {recommendation.value} ({confidence}% confidence)",
            ),
        )

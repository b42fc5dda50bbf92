"""
Use-case: produce an AI-assisted BUY/HOLD/SELL analysis for a stock.
Depends only on Domain ports and entities; no infrastructure imports.

Degrade chain:
  1. structured:    the model replied with a valid JSON object.
  2. heuristic:     the model replied, but only free text could be mined.
  3. deterministic: the model call failed or timed out; TechnicalAnalyzer runs offline.
"""

import asyncio
import logging
from typing import Optional, Sequence

from src.application.analysis import metrics
from src.application.analysis.prompts import build_analysis_prompt
from src.application.analysis.response_interpreter import ResponseInterpreter
from src.application.analysis.technical_analyzer import TechnicalAnalyzer, recent_closes
from src.domain.entities.analysis import AnalysisOutcome, AnalysisResult, AnalysisTier
from src.domain.entities.stock_price import CompanyInfo, PricePoint
from src.domain.errors import (
    InsufficientPriceHistoryError,
    LanguageModelError,
    UnorderedPriceHistoryError,
)
from src.domain.ports.llm_port import ILanguageModel

logger = logging.getLogger(__name__)

MIN_HISTORY_POINTS = 2


class AnalyzeStockUseCase:
    def __init__(
        self,
        llm: ILanguageModel,
        interpreter: Optional[ResponseInterpreter] = None,
        technical_analyzer: Optional[TechnicalAnalyzer] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._llm = llm
        self._interpreter = interpreter or ResponseInterpreter()
        self._technical_analyzer = technical_analyzer or TechnicalAnalyzer()
        self._timeout_seconds = timeout_seconds

    async def execute(
        self,
        symbol: str,
        current_price: float,
        historical_data: Sequence[PricePoint],
        company: Optional[CompanyInfo] = None,
    ) -> AnalysisOutcome:
        """Analyze *symbol* and report which tier produced the result.

        Args:
            symbol:          Ticker symbol (case-insensitive).
            current_price:   Latest traded price; must be positive.
            historical_data: Daily bars, oldest first. Only the last 30 are used.
            company:         Optional company name / sector / market cap.

        Raises:
            ValueError: blank symbol, non-positive price or non-positive closes.
            InsufficientPriceHistoryError: fewer than 2 historical points.
            UnorderedPriceHistoryError: dates not strictly ascending (unsorted or
                duplicated).
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        if current_price is None or current_price <= 0:
            raise ValueError("current_price must be positive")
        if len(historical_data) < MIN_HISTORY_POINTS:
            raise InsufficientPriceHistoryError(
                f"at least {MIN_HISTORY_POINTS} historical points are required, "
                f"got {len(historical_data)}"
            )
        _require_chronological(historical_data)
        symbol = symbol.upper().strip()

        closes = recent_closes(historical_data)
        price_change = metrics.price_change_percent(current_price, closes[0])
        volatility = metrics.volatility(closes)

        prompt = build_analysis_prompt(
            symbol, current_price, price_change, volatility, closes, company
        )

        try:
            reply = await self._complete(prompt)
        except Exception as exc:
            logger.warning(
                "AI analysis for %s failed (%s: %s); falling back to technical analysis",
                symbol,
                type(exc).__name__,
                exc,
            )
            return AnalysisOutcome(
                AnalysisTier.DETERMINISTIC,
                self._technical_analyzer.analyze(symbol, current_price, historical_data),
            )

        outcome = self._interpreter.interpret(reply, price_change, volatility)
        logger.info("AI analysis for %s resolved via %s tier", symbol, outcome.tier.value)
        return outcome

    async def analyze(
        self,
        symbol: str,
        current_price: float,
        historical_data: Sequence[PricePoint],
        company: Optional[CompanyInfo] = None,
    ) -> AnalysisResult:
        outcome = await self.execute(symbol, current_price, historical_data, company)
        return outcome.result

    async def _complete(self, prompt: str) -> str:
        try:
            reply = await asyncio.wait_for(
                asyncio.to_thread(self._llm.complete, prompt),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise LanguageModelError(
                f"language model did not answer within {self._timeout_seconds}s"
            ) from exc
        if not isinstance(reply, str) or not reply.strip():
            raise LanguageModelError("language model returned an empty reply")
        return reply


def _require_chronological(historical_data: Sequence[PricePoint]) -> None:
    for previous, current in zip(historical_data, historical_data[1:]):
        if current.date <= previous.date:
            raise UnorderedPriceHistoryError(
                f"historical data must be ascending by date without duplicates; "
                f"{current.date} follows {previous.date}"
            )

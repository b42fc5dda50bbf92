"""
CLI entry point: fetch market data and print an AI analysis for one or more symbols.

This script is a Composition Root like the FastAPI app. Lookups run one symbol
at a time and every provider call goes through the shared request spacer, so a
long symbol list stays within the market-data rate limit.

    python -m src.infrastructure.entrypoints.cli AAPL MSFT
    python -m src.infrastructure.entrypoints.cli NVDA --full --json
"""

import argparse
import asyncio
import json
import logging
import sys

from src.application.use_cases.analyze_stock import AnalyzeStockUseCase
from src.application.use_cases.get_stock_snapshot import GetStockSnapshotUseCase
from src.domain.entities.analysis import AnalysisOutcome
from src.domain.errors import MarketDataError
from src.infrastructure.config.settings import Settings
from src.infrastructure.entrypoints.composition import build_language_model, build_stock_provider
from src.infrastructure.observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _render(symbol: str, outcome: AnalysisOutcome) -> str:
    result = outcome.result
    lines = [
        f"=== {symbol} ===",
        f"Recommendation: {result.recommendation.value} "
        f"({result.confidence}% confidence, {result.risk_level.value} risk, "
        f"{outcome.tier.value} tier)",
        "",
        *(f"  - {point}" for point in result.key_points),
        "",
        result.analysis,
    ]
    return "\n".join(lines)


def _as_json(symbol: str, outcome: AnalysisOutcome) -> dict:
    result = outcome.result
    return {
        "symbol": symbol,
        "tier": outcome.tier.value,
        "analysis": result.analysis,
        "recommendation": result.recommendation.value,
        "confidence": result.confidence,
        "riskLevel": result.risk_level.value,
        "keyPoints": list(result.key_points),
    }


async def run(symbols: list[str], full: bool, as_json: bool) -> int:
    settings = Settings.from_env()
    snapshot_uc = GetStockSnapshotUseCase(build_stock_provider(settings))
    analyze_uc = AnalyzeStockUseCase(
        build_language_model(settings),
        timeout_seconds=settings.llm_timeout_seconds,
    )

    failures = 0
    for raw_symbol in symbols:
        symbol = raw_symbol.upper().strip()
        try:
            snapshot = await asyncio.to_thread(
                snapshot_uc.execute, symbol, "full" if full else "compact"
            )
            outcome = await analyze_uc.execute(
                symbol,
                snapshot.quote.current_price,
                snapshot.historical_data,
                snapshot.company,
            )
        except (MarketDataError, ValueError) as exc:
            logger.error("Skipping %s: %s", symbol, exc)
            failures += 1
            continue

        if as_json:
            print(json.dumps(_as_json(symbol, outcome), indent=2))
        else:
            print(_render(symbol, outcome))
            print()
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="AI-assisted stock analysis")
    parser.add_argument("symbols", nargs="+", help="Ticker symbols, e.g. AAPL MSFT")
    parser.add_argument("--full", action="store_true", help="Fetch the full daily history")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args(argv)

    configure_logging()
    return asyncio.run(run(args.symbols, full=args.full, as_json=args.json))


if __name__ == "__main__":
    sys.exit(main())

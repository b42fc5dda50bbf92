"""
FastAPI entry point: HTTP API consumed by the stock dashboard.

create_app() receives its adapters so tests can inject fakes; the module-level
``app`` is the Composition Root for real runs and wires adapters from Settings.

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

import dataclasses
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.application.use_cases.analyze_stock import AnalyzeStockUseCase
from src.application.use_cases.get_stock_snapshot import GetStockSnapshotUseCase
from src.application.use_cases.search_symbols import SearchSymbolsUseCase
from src.domain.entities.analysis import AnalysisResult
from src.domain.entities.stock_price import CompanyInfo, PricePoint
from src.domain.errors import (
    InsufficientPriceHistoryError,
    MarketDataError,
    UnorderedPriceHistoryError,
)
from src.domain.ports.llm_port import ILanguageModel
from src.domain.ports.stock_data_port import IStockDataProvider
from src.infrastructure.config.settings import Settings
from src.infrastructure.entrypoints.composition import build_language_model, build_stock_provider
from src.infrastructure.observability.logging_config import configure_logging

logger = logging.getLogger(__name__)

ANALYSIS_PATH = "/api/ai-analysis"


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------


class PricePointIn(BaseModel):
    date: str
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    close: float = Field(gt=0)
    volume: int = Field(ge=0)

    def to_entity(self) -> PricePoint:
        return PricePoint(**self.model_dump())


class CompanyInfoIn(BaseModel):
    Name: Optional[str] = None
    Sector: Optional[str] = None
    MarketCapitalization: Optional[str | int | float] = None

    def to_entity(self) -> CompanyInfo:
        return CompanyInfo.from_overview(self.model_dump())


class AnalysisRequest(BaseModel):
    symbol: str = Field(min_length=1)
    currentPrice: float = Field(gt=0)
    historicalData: list[PricePointIn] = Field(min_length=1)
    companyInfo: Optional[CompanyInfoIn] = None


class AnalysisResponse(BaseModel):
    analysis: str
    recommendation: str
    confidence: int
    riskLevel: str
    keyPoints: list[str]

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(
            analysis=result.analysis,
            recommendation=result.recommendation.value,
            confidence=result.confidence,
            riskLevel=result.risk_level.value,
            keyPoints=list(result.key_points),
        )


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    stock_provider: IStockDataProvider,
    llm: ILanguageModel,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or Settings()
    search_uc = SearchSymbolsUseCase(stock_provider)
    snapshot_uc = GetStockSnapshotUseCase(stock_provider)
    analyze_uc = AnalyzeStockUseCase(llm, timeout_seconds=settings.llm_timeout_seconds)

    app = FastAPI(title="Stock Insight API")

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        if request.url.path == ANALYSIS_PATH:
            return _error(400, "Missing required fields", details=_jsonable_errors(exc))
        return _error(400, "Invalid request", details=_jsonable_errors(exc))

    @app.get("/api/search")
    def search(q: Optional[str] = None):
        try:
            matches = search_uc.execute(q or "")
        except ValueError as exc:
            return _error(400, str(exc))
        return {"results": [dataclasses.asdict(m) for m in matches]}

    @app.get("/api/stock/{symbol}")
    def stock(symbol: str, outputsize: str = "compact"):
        try:
            snapshot = snapshot_uc.execute(symbol, output_size=outputsize)
        except ValueError as exc:
            return _error(400, str(exc))
        except MarketDataError as exc:
            logger.warning("Stock lookup for %s failed: %s", symbol, exc)
            return _error(404, "Stock not found or API limit reached. Please try again later.")

        quote = snapshot.quote
        company = snapshot.company
        return {
            "symbol": symbol.upper().strip(),
            "currentPrice": quote.current_price,
            "change": quote.change,
            "changePercent": quote.change_percent,
            "volume": quote.volume,
            "previousClose": quote.previous_close,
            "historicalData": [dataclasses.asdict(p) for p in snapshot.historical_data],
            "companyName": company.name if company else None,
            "companyInfo": (
                {
                    "Name": company.name,
                    "Sector": company.sector,
                    "MarketCapitalization": company.market_capitalization,
                }
                if company
                else None
            ),
        }

    @app.post(ANALYSIS_PATH, response_model=AnalysisResponse)
    async def ai_analysis(body: AnalysisRequest):
        try:
            outcome = await analyze_uc.execute(
                symbol=body.symbol,
                current_price=body.currentPrice,
                historical_data=[p.to_entity() for p in body.historicalData],
                company=body.companyInfo.to_entity() if body.companyInfo else None,
            )
        except InsufficientPriceHistoryError as exc:
            return _error(400, "Not enough historical data to analyze", details=str(exc))
        except UnorderedPriceHistoryError as exc:
            return _error(400, "Historical data must be in ascending date order", details=str(exc))
        except ValueError as exc:
            return _error(400, "Missing required fields", details=str(exc))
        except Exception:
            logger.exception("Error performing AI analysis for %s", body.symbol)
            return _error(500, "Failed to perform AI analysis")

        return JSONResponse(
            content=AnalysisResponse.from_result(outcome.result).model_dump(),
            headers={"X-Analysis-Tier": outcome.tier.value},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# ---------------------------------------------------------------------------
# Composition Root: wire all dependencies once at startup
# ---------------------------------------------------------------------------


def _build_default_app() -> FastAPI:
    configure_logging()
    settings = Settings.from_env()
    return create_app(
        stock_provider=build_stock_provider(settings),
        llm=build_language_model(settings),
        settings=settings,
    )


app = _build_default_app()

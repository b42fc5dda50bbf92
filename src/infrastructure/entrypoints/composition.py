"""
Composition Root helpers: choose and wire infrastructure adapters from Settings.
Shared by the FastAPI app and the CLI so both run the same object graph.
"""

from src.domain.ports.llm_port import ILanguageModel
from src.domain.ports.stock_data_port import IStockDataProvider
from src.infrastructure.config.settings import Settings
from src.infrastructure.stock_data.request_spacer import market_data_spacer


def build_stock_provider(settings: Settings) -> IStockDataProvider:
    if settings.market_data_provider == "yfinance":
        from src.infrastructure.stock_data.yfinance_adapter import YFinanceStockDataProvider
        return YFinanceStockDataProvider()

    from src.infrastructure.stock_data.alpha_vantage_adapter import AlphaVantageStockDataProvider
    market_data_spacer.min_interval = settings.market_data_min_interval_seconds
    return AlphaVantageStockDataProvider(
        api_key=settings.alpha_vantage_api_key,
        spacer=market_data_spacer,
    )


def build_language_model(settings: Settings) -> ILanguageModel:
    if settings.llm_provider == "bedrock":
        from src.infrastructure.llm.bedrock_adapter import BedrockChatAdapter
        from src.infrastructure.observability.langfuse_adapter import build_observability
        return BedrockChatAdapter(observability=build_observability())

    from src.infrastructure.llm.gemini_adapter import GeminiLanguageModel
    return GeminiLanguageModel(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.llm_timeout_seconds,
    )

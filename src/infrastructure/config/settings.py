"""
Runtime configuration read from the environment (and a local .env file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    alpha_vantage_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    llm_provider: str = "gemini"
    market_data_provider: str = "alphavantage"
    llm_timeout_seconds: float = 30.0
    market_data_min_interval_seconds: float = 1.1
    aws_region: str = "us-east-1"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        secret_arn = os.getenv("APP_SECRET_ARN")
        if secret_arn:
            from src.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter
            SecretsManagerAdapter().load_into_env(secret_arn)

        llm_provider = (os.getenv("LLM_PROVIDER") or "gemini").strip().lower()
        if llm_provider not in ("gemini", "bedrock"):
            raise ValueError(f"Unsupported LLM_PROVIDER: {llm_provider!r}")
        market_data_provider = (
            os.getenv("MARKET_DATA_PROVIDER") or "alphavantage"
        ).strip().lower()
        if market_data_provider not in ("alphavantage", "yfinance"):
            raise ValueError(f"Unsupported MARKET_DATA_PROVIDER: {market_data_provider!r}")

        return cls(
            alpha_vantage_api_key=os.getenv("ALPHA_VANTAGE_API_KEY") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or "gemini-1.5-flash",
            llm_provider=llm_provider,
            market_data_provider=market_data_provider,
            llm_timeout_seconds=_float_env("LLM_TIMEOUT_SECONDS", 30.0),
            market_data_min_interval_seconds=_float_env(
                "MARKET_DATA_MIN_INTERVAL_SECONDS", 1.1
            ),
            aws_region=os.getenv("AWS_DEFAULT_REGION", "us-east-1"),
        )

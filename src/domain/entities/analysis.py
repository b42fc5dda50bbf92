"""
Domain entities for stock analysis results.
Zero external dependencies: pure Python dataclasses and enums only.
"""

from dataclasses import dataclass
from enum import Enum


class Recommendation(str, Enum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AnalysisTier(str, Enum):
    """Which stage of the degrade chain produced a result."""

    STRUCTURED = "structured"
    HEURISTIC = "heuristic"
    DETERMINISTIC = "deterministic"


@dataclass(frozen=True)
class AnalysisResult:
    analysis: str
    recommendation: Recommendation
    confidence: int
    risk_level: RiskLevel
    key_points: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence must be within 0-100, got {self.confidence}")
        if len(self.key_points) > 5:
            raise ValueError("at most 5 key points are allowed")


@dataclass(frozen=True)
class AnalysisOutcome:
    tier: AnalysisTier
    result: AnalysisResult

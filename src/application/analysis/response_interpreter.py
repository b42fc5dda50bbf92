"""
Interprets the language model's free-text reply.

Stage 1 decodes the first JSON object in the reply and validates it against
StructuredReply. Stage 2 runs independent text extractors over the same reply
when no valid object is present. Every extractor is total: it always returns
a usable value.
"""

import json
import logging
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.application.analysis.metrics import risk_level_for
from src.domain.entities.analysis import (
    AnalysisOutcome,
    AnalysisResult,
    AnalysisTier,
    Recommendation,
    RiskLevel,
)

logger = logging.getLogger(__name__)

MAX_KEY_POINTS = 5
DEFAULT_CONFIDENCE = 50
MAX_JSON_CANDIDATES = 32

_RECOMMENDATION_RE = re.compile(r"\b(BUY|SELL|HOLD)\b", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(
    r"\bconfidence(?:\s+(?:level|score))?[\"']?[\s:=]+(\d+)", re.IGNORECASE
)
_BULLET_RE = re.compile(r"^[ \t]*[-•][ \t]*(.+?)[ \t]*$", re.MULTILINE)


def _clamp_confidence(value: float) -> int:
    return max(0, min(100, int(round(value))))


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def _matching_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def find_json_object(
    text: str, max_candidates: int = MAX_JSON_CANDIDATES
) -> Optional[dict]:
    """Return the first balanced ``{...}`` substring that decodes to a JSON object.

    At most *max_candidates* opening braces are tried, so the scan stays
    linear in the reply length.
    """
    start = text.find("{")
    attempts = 0
    while start != -1 and attempts < max_candidates:
        attempts += 1
        end = _matching_brace(text, start)
        if end is not None:
            try:
                candidate = json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                candidate = None
            if isinstance(candidate, dict):
                return candidate
        start = text.find("{", start + 1)
    return None


def find_recommendation(text: str) -> Recommendation:
    match = _RECOMMENDATION_RE.search(text)
    return Recommendation(match.group(1).upper()) if match else Recommendation.HOLD


def find_confidence(text: str) -> int:
    match = _CONFIDENCE_RE.search(text)
    return _clamp_confidence(int(match.group(1))) if match else DEFAULT_CONFIDENCE


def find_bullet_points(text: str, limit: int = MAX_KEY_POINTS) -> list[str]:
    """Lines starting with ``-`` or ``•``, marker stripped, first *limit* only."""
    points = [
        item for item in _BULLET_RE.findall(text) if any(ch.isalnum() for ch in item)
    ]
    return points[:limit]


# ---------------------------------------------------------------------------
# Structured reply schema
# ---------------------------------------------------------------------------


class StructuredReply(BaseModel):
    """Schema for the JSON object the prompt asks the model to return."""

    model_config = ConfigDict(extra="ignore")

    recommendation: Recommendation = Recommendation.HOLD
    confidence: int = DEFAULT_CONFIDENCE
    riskLevel: RiskLevel = RiskLevel.MEDIUM
    keyPoints: list[str] = Field(default_factory=list)
    analysis: Optional[str] = None

    @field_validator("recommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, value: Any) -> Any:
        if value is None:
            return Recommendation.HOLD
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("riskLevel", mode="before")
    @classmethod
    def _normalize_risk(cls, value: Any) -> Any:
        if value is None:
            return RiskLevel.MEDIUM
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_CONFIDENCE
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError("confidence must be numeric")
        if isinstance(value, str):
            value = value.strip().rstrip("%")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError("confidence must be finite")
        return _clamp_confidence(number)

    @field_validator("keyPoints", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("keyPoints")
    @classmethod
    def _truncate(cls, value: list[str]) -> list[str]:
        return value[:MAX_KEY_POINTS]

    def to_result(self, raw_text: str) -> AnalysisResult:
        return AnalysisResult(
            analysis=self.analysis or raw_text,
            recommendation=self.recommendation,
            confidence=self.confidence,
            risk_level=self.riskLevel,
            key_points=tuple(self.keyPoints),
        )


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------


class ResponseInterpreter:
    def interpret(
        self,
        text: str,
        price_change_30d: float,
        volatility: float,
    ) -> AnalysisOutcome:
        """Turn a model reply into an AnalysisOutcome.

        Args:
            text:             Raw model completion.
            price_change_30d: Precomputed 30-day change, used only by the
                              heuristic stage when no bullets are found.
            volatility:       Precomputed volatility; the heuristic stage
                              derives the risk level from it.
        """
        structured = self.parse_structured(text)
        if structured is not None:
            return AnalysisOutcome(AnalysisTier.STRUCTURED, structured)
        return AnalysisOutcome(
            AnalysisTier.HEURISTIC,
            self.parse_heuristic(text, price_change_30d, volatility),
        )

    def parse_structured(self, text: str) -> Optional[AnalysisResult]:
        payload = find_json_object(text)
        if payload is None:
            logger.info("Model reply contains no JSON object; using text heuristics")
            return None
        try:
            return StructuredReply.model_validate(payload).to_result(text)
        except ValidationError as exc:
            logger.warning(
                "Model JSON failed schema validation (%d errors); using text heuristics",
                exc.error_count(),
            )
            return None
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Model JSON could not be decoded (%s: %s); using text heuristics",
                type(exc).__name__,
                exc,
            )
            return None

    def parse_heuristic(
        self,
        text: str,
        price_change_30d: float,
        volatility: float,
    ) -> AnalysisResult:
        recommendation = find_recommendation(text)
        key_points = find_bullet_points(text) or [
            f"30-day price change: {price_change_30d:.2f}%",
            f"Volatility level: {volatility:.2f}%",
            f"AI recommendation: {recommendation.value}",
        ]
        return AnalysisResult(
            analysis=text,
            recommendation=recommendation,
            confidence=find_confidence(text),
            risk_level=risk_level_for(volatility),
            key_points=tuple(key_points),
        )

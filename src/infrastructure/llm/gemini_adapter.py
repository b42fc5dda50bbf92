"""
Infrastructure adapter: Google Gemini generateContent REST API → ILanguageModel.
Transport and payload-shape details are confined here.
"""

from typing import Optional

import httpx

from src.domain.errors import LanguageModelError
from src.domain.ports.llm_port import ILanguageModel

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class GeminiLanguageModel(ILanguageModel):
    """Single-shot text completion against the Gemini REST endpoint."""

    DEFAULT_MODEL = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._url = GEMINI_API_URL.format(model=model)
        self._client = client or httpx.Client(timeout=timeout)

    def complete(self, prompt: str) -> str:
        if not self._api_key:
            raise LanguageModelError("GEMINI_API_KEY is not configured")
        try:
            response = self._client.post(
                self._url,
                params={"key": self._api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LanguageModelError(f"Gemini request failed: {exc}") from exc

        try:
            return payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LanguageModelError("Gemini response has no candidate text") from exc

"""
Port (interface) for the store that holds provider API keys
(ALPHA_VANTAGE_API_KEY, GEMINI_API_KEY, LANGFUSE_*).
"""

from abc import ABC, abstractmethod


class ISecretStore(ABC):
    @abstractmethod
    def fetch_api_keys(self, secret_id: str) -> dict[str, str]:
        """Return the key name -> value pairs stored under *secret_id*."""
        ...

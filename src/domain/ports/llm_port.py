"""
Port (interface) for language model providers.
Infrastructure adapters (e.g. GeminiLanguageModel, BedrockChatAdapter) must implement this interface.
"""

from abc import ABC, abstractmethod


class ILanguageModel(ABC):
    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send a single text prompt and return the model's free-text completion.

        Raises:
            LanguageModelError (or any transport error) on failure. No retry.
        """
        ...

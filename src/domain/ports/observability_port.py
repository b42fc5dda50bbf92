"""
Port (interface) for tracing language model calls.
Implemented by LangfuseTracer; BedrockChatAdapter merges the returned run
config into every model invocation.
"""

from abc import ABC, abstractmethod
from typing import Sequence


class IObservabilityHandler(ABC):
    @abstractmethod
    def trace_config(self, tags: Sequence[str]) -> dict:
        """Run-config fragment (callbacks, metadata) that traces one call under *tags*."""
        ...

    @abstractmethod
    def flush(self) -> None:
        """Send buffered traces to the backend."""
        ...

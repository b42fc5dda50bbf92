"""
Infrastructure adapter: Langfuse tracing for Bedrock analysis calls.

Each completion becomes one Langfuse trace tagged with the analysis service
name and the Bedrock model id. build_observability() returns None when
LANGFUSE_PUBLIC_KEY is unset, and Bedrock then runs untraced.
"""

import os
from typing import Optional, Sequence

from src.domain.ports.observability_port import IObservabilityHandler

SERVICE_TAG = "stock-analysis"


class LangfuseTracer(IObservabilityHandler):
    def __init__(self, environment: Optional[str] = None) -> None:
        from langfuse.langchain import CallbackHandler
        self._handler = CallbackHandler()
        self._environment = environment or os.environ.get("APP_ENV", "local")

    def trace_config(self, tags: Sequence[str]) -> dict:
        return {
            "callbacks": [self._handler],
            "metadata": {
                "langfuse_tags": [SERVICE_TAG, *tags],
                "environment": self._environment,
            },
        }

    def flush(self) -> None:
        from langfuse import get_client
        get_client().flush()


def build_observability() -> Optional[IObservabilityHandler]:
    if not os.environ.get("LANGFUSE_PUBLIC_KEY"):
        return None
    return LangfuseTracer()

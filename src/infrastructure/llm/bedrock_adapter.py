"""
Infrastructure adapter: Amazon Bedrock (ChatBedrock) → ILanguageModel.
All ChatBedrock / langchain_aws details are confined here.
When an IObservabilityHandler is injected every call is traced and flushed.
"""

import os
from typing import Any, Optional

from langchain_aws import ChatBedrock
from langchain_core.messages import HumanMessage

from src.domain.errors import LanguageModelError
from src.domain.ports.llm_port import ILanguageModel
from src.domain.ports.observability_port import IObservabilityHandler


class BedrockChatAdapter(ILanguageModel):
    """Wraps ChatBedrock and exposes the ILanguageModel interface."""

    MODEL_ID = "us.amazon.nova-pro-v1:0"

    def __init__(
        self,
        observability: Optional[IObservabilityHandler] = None,
        _runnable: Any = None,
    ) -> None:
        """
        Args:
            observability: Optional tracing handler (e.g. Langfuse adapter).
            _runnable:     Optional pre-configured Runnable, used by tests to
                           avoid constructing ChatBedrock.
        """
        self._observability = observability
        self._model_id = os.environ.get("BEDROCK_MODEL_ID", self.MODEL_ID)
        if _runnable is not None:
            self._llm = _runnable
        else:
            self._llm = ChatBedrock(
                model=self._model_id,
                model_kwargs={"temperature": 0.0},
                region_name=os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
            )

    def complete(self, prompt: str) -> str:
        config: dict = {}
        if self._observability is not None:
            config = self._observability.trace_config([self._model_id])
        try:
            message = self._llm.invoke([HumanMessage(content=prompt)], config=config)
        finally:
            if self._observability is not None:
                self._observability.flush()
        content = getattr(message, "content", message)
        if isinstance(content, list):
            # Multi-part content blocks: keep only the text parts.
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        if not isinstance(content, str):
            raise LanguageModelError("Bedrock returned a non-text message")
        return content

"""pydantic-ai backed completion provider."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable

from pydantic_ai import Agent
from pydantic_ai.models import Model

from services.generation.models import ExecutionSettings


logger = logging.getLogger(__name__)

ModelResolver = Callable[[str], Model]


class PydanticAICompletionProvider:
    """Stream plain-text completions through a pydantic-ai `Agent`.

    `model_resolver` maps a model identifier to a configured pydantic-ai
    `Model`; resolved models are cached per identifier so the underlying
    HTTP client is reused across requests.
    """

    def __init__(self, model_resolver: ModelResolver) -> None:
        self._model_resolver = model_resolver
        self._models: dict[str, Model] = {}

    def _get_model(self, model_id: str) -> Model:
        model = self._models.get(model_id)
        if model is None:
            model = self._model_resolver(model_id)
            self._models[model_id] = model
        return model

    async def stream(
        self, model_id: str, prompt: str, settings: ExecutionSettings
    ) -> AsyncIterator[str]:
        agent: Agent[None, str] = Agent(self._get_model(model_id), output_type=str)
        async with agent.run_stream(
            prompt, model_settings=settings.to_model_settings()
        ) as result:
            async for delta in result.stream_text(delta=True):
                yield delta

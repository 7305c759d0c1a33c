"""Prompt executor: run one prompt and relay its deltas as fragments."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from core.observability import get_tracer
from services.generation.channel import FragmentChannel
from services.generation.exceptions import GenerationError, ProviderError
from services.generation.interfaces import CompletionProvider
from services.generation.models import ExecutionSettings, Fragment


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

CompletionHandler = Callable[[str], Awaitable[object] | object]


class PromptExecutor:
    """Executes prompts against a completion provider.

    When bound to a channel, every non-empty delta is written to it as a
    `Fragment` tagged with the execution's part. Without a channel the
    executor only accumulates text, which is how the seed call runs.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        default_model: str,
        channel: FragmentChannel | None = None,
    ) -> None:
        self._provider = provider
        self._default_model = default_model
        self._channel = channel

    def bind(self, channel: FragmentChannel) -> PromptExecutor:
        """Return an executor sharing this provider that relays into `channel`."""
        return PromptExecutor(self._provider, self._default_model, channel)

    async def execute(
        self,
        part: str,
        prompt: str,
        settings: ExecutionSettings,
        on_complete: CompletionHandler | None = None,
    ) -> str:
        """Stream `prompt` and return the accumulated text.

        `on_complete` receives the full text once the stream is exhausted; if
        it returns an awaitable, that is awaited before `execute` returns, so
        a dependent prompt can be chained inside the same task.

        Raises:
            ProviderError: the provider failed while opening or streaming.
            asyncio.CancelledError: the calling task was cancelled.
        """
        model_id = settings.model_override or self._default_model
        logger.info("Running generation for part=%s model=%s", part, model_id)

        buffer: list[str] = []
        with tracer.start_as_current_span("generation.execute") as span:
            span.set_attribute("generation.part", part)
            span.set_attribute("generation.model", model_id)
            try:
                async for delta in self._provider.stream(model_id, prompt, settings):
                    if not delta:
                        continue
                    if self._channel is not None:
                        self._channel.write(Fragment(part=part, content=delta))
                    buffer.append(delta)
            except asyncio.CancelledError:
                logger.info("Generation cancelled for part=%s", part)
                raise
            except GenerationError:
                raise
            except Exception as exc:
                logger.warning("Provider failed for part=%s: %s", part, exc)
                raise ProviderError(
                    f"Generation failed for part '{part}': {exc}", part=part
                ) from exc
            span.set_attribute("generation.delta_count", len(buffer))

        output = "".join(buffer)
        logger.debug("Completed part=%s chars=%d", part, len(output))

        if on_complete is not None:
            result = on_complete(output)
            if inspect.isawaitable(result):
                await result
        return output

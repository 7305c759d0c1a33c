"""Streaming recipe generation endpoint."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from core.error_handler import structured_logger
from schemas.recipes import GenerationRequest
from services.generation.channel import FragmentChannel
from services.generation.exceptions import GenerationError
from services.generation.model_factory import get_recipe_generator
from services.generation.models import Fragment
from services.generation.orchestrator import RecipeGenerator


logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


def format_fragment(fragment: Fragment) -> str:
    """Serialize a fragment as one SSE event: `data: <part>|<content>`.

    Generated text uses the ⮑ sentinel instead of newlines, so content fits
    on a single data line.
    """
    return f"data: {fragment.part}|{fragment.content}\n\n"


def format_error(error: GenerationError) -> str:
    return f"event: error\ndata: {error.error_code}\n\n"


async def stream_recipe(
    generator: RecipeGenerator, request: GenerationRequest
) -> AsyncGenerator[str, None]:
    """Run one generation and yield its fragments as SSE lines.

    The generator's sink feeds a local channel that this async generator
    drains; the channel closes when the generation task finishes. If the
    response is abandoned (client disconnect), the generation is cancelled.

    A `GenerationError` raised before the first fragment propagates so the
    caller can still answer with a plain HTTP error; later failures end the
    stream with an `error` event.
    """
    outbound = FragmentChannel()
    delivered = False

    async def sink(fragment: Fragment) -> None:
        outbound.write(fragment)

    task = asyncio.create_task(generator.generate(request, sink))
    task.add_done_callback(lambda _: outbound.close())
    try:
        async for fragment in outbound:
            delivered = True
            yield format_fragment(fragment)
        await task
    except GenerationError as exc:
        if not delivered:
            raise
        structured_logger.warning(
            "Recipe generation failed mid-stream",
            error_code=exc.error_code,
            error_type=exc.__class__.__name__,
        )
        yield format_error(exc)
    finally:
        if not task.done():
            logger.info("Client went away; cancelling recipe generation")
            task.cancel()
            # Provider streams unwind before the response is torn down.
            await asyncio.wait((task,))
            if not task.cancelled() and task.exception() is not None:
                logger.info("Generation ended during cancellation: %r", task.exception())


@router.post("/generate", response_class=StreamingResponse)
async def generate_recipe(
    request: GenerationRequest,
    generator: Annotated[RecipeGenerator, Depends(get_recipe_generator)],
) -> StreamingResponse:
    """Stream a generated recipe as Server-Sent Events.

    Each event payload is `<part>|<content>` where part is one of
    `alt`, `add`, `ste`, `int`, `ing`, `sde`. Fragments of different parts
    interleave; clients append content to the element for its part.

    The seed generation completes before the response starts, so a seed
    failure is reported as a regular JSON error rather than an SSE event.
    """
    stream = stream_recipe(generator, request)
    first = await anext(stream)

    async def events() -> AsyncGenerator[str, None]:
        try:
            yield first
            async for event in stream:
                yield event
        finally:
            await stream.aclose()

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

"""Recipe generation orchestrator.

Runs the seed generation, picks one candidate, then fans out the dependent
and independent part generations concurrently. Every fan-out task writes its
deltas into one shared `FragmentChannel`; a single drain task forwards them
to the caller's sink while production is still running.

Completion protocol:

1. `alt` is written before any fan-out task starts.
2. The channel is closed once the fan-out task group has exited, whether it
   succeeded or failed.
3. The drain task ends after it has delivered everything enqueued before
   the close, and only then does `generate` return or re-raise.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass

from schemas.recipes import GenerationRequest, RecipeCandidate
from services.generation.candidates import parse_candidates, select_candidate
from services.generation.channel import FragmentChannel
from services.generation.executor import PromptExecutor
from services.generation.interfaces import CompletionProvider
from services.generation.models import (
    INGREDIENT_NOTES_SETTINGS,
    INGREDIENTS_SETTINGS,
    INTRO_SETTINGS,
    SEED_SETTINGS,
    SIDES_SETTINGS,
    STEPS_SETTINGS,
    ExecutionSettings,
    Fragment,
    FragmentSink,
    Part,
)
from services.generation.prompts import (
    build_ingredient_notes_prompt,
    build_ingredients_prompt,
    build_intro_prompt,
    build_seed_prompt,
    build_sides_prompt,
    build_steps_prompt,
    render_alternates,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Model identifiers resolved once from settings."""

    default_model: str
    fast_model: str


class RecipeGenerator:
    """Fan-out orchestrator producing a streamed, multi-part recipe.

    One instance may serve many requests: all per-request state (channel,
    executor binding, selected recipe) lives in `generate`'s frame.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        config: GeneratorConfig,
        rng: random.Random | None = None,
    ) -> None:
        self._executor = PromptExecutor(provider, config.default_model)
        self._config = config
        self._rng = rng or random.Random()

    async def generate(self, request: GenerationRequest, sink: FragmentSink) -> None:
        """Generate a recipe for `request`, delivering fragments to `sink`.

        Cancel the awaiting task to abort; in-flight provider streams and the
        drain task are cancelled with it.

        Raises:
            ContentFormatError: the seed output was not a candidate list.
            SelectionError: the seed produced no candidates.
            ProviderError: any provider call failed (first failure wins).
            asyncio.CancelledError: the caller cancelled the generation.
        """
        candidates = await self._generate_candidates(request)
        selected = select_candidate(candidates, self._rng)
        recipe = candidates[selected]
        logger.info(
            "Selected recipe %r (%d of %d candidates)",
            recipe.name,
            selected + 1,
            len(candidates),
        )

        channel = FragmentChannel()
        channel.write(
            Fragment(part=Part.ALTERNATES, content=render_alternates(candidates, selected))
        )

        producers = asyncio.create_task(
            self._fan_out(self._executor.bind(channel), channel, request, recipe),
            name="recipe-fan-out",
        )
        drain = asyncio.create_task(self._drain(channel, sink), name="recipe-drain")
        try:
            await asyncio.wait(
                (producers, drain), return_when=asyncio.FIRST_EXCEPTION
            )
            if drain.done() and drain.exception() is not None:
                # The sink failed; nothing left to deliver to.
                drain.result()
            await drain
            producers.result()
        except BaseException:
            if not drain.done():
                logger.info(
                    "Dropping %d undelivered fragment(s)", channel.pending()
                )
            raise
        finally:
            for task in (producers, drain):
                task.cancel()
            channel.close()
            await asyncio.wait((producers, drain))
            # Only one failure propagates; retrieve the other so it is not
            # reported as unhandled.
            for task in (producers, drain):
                if task.done() and not task.cancelled() and task.exception():
                    logger.debug("Task %s ended with %r", task.get_name(), task.exception())

        logger.info("Recipe generation complete for %r", recipe.name)

    async def _generate_candidates(
        self, request: GenerationRequest
    ) -> list[RecipeCandidate]:
        prompt = build_seed_prompt(request.ingredients_on_hand, request.prep_time)
        settings = ExecutionSettings(
            max_tokens=SEED_SETTINGS.max_tokens,
            temperature=SEED_SETTINGS.temperature,
            top_p=SEED_SETTINGS.top_p,
            model_override=self._config.fast_model,
        )
        output = await self._executor.execute(Part.SEED, prompt, settings)
        candidates = parse_candidates(output)
        logger.info("Generated %d recipe candidates", len(candidates))
        return candidates

    async def _fan_out(
        self,
        executor: PromptExecutor,
        channel: FragmentChannel,
        request: GenerationRequest,
        recipe: RecipeCandidate,
    ) -> None:
        try:
            async with asyncio.TaskGroup() as group:
                group.create_task(
                    self._generate_ingredients_and_steps(executor, request, recipe)
                )
                group.create_task(
                    executor.execute(
                        Part.INTRO, build_intro_prompt(recipe), INTRO_SETTINGS
                    )
                )
                group.create_task(
                    executor.execute(
                        Part.INGREDIENT_NOTES,
                        build_ingredient_notes_prompt(request.ingredients_on_hand),
                        INGREDIENT_NOTES_SETTINGS,
                    )
                )
                group.create_task(
                    executor.execute(
                        Part.SIDES, build_sides_prompt(recipe), SIDES_SETTINGS
                    )
                )
        except ExceptionGroup as errors:
            # The group cancels the siblings of the first failing task; report
            # that first failure rather than the aggregate, keeping its cause.
            raise errors.exceptions[0]
        finally:
            channel.close()

    async def _generate_ingredients_and_steps(
        self,
        executor: PromptExecutor,
        request: GenerationRequest,
        recipe: RecipeCandidate,
    ) -> None:
        async def generate_steps(ingredients: str) -> None:
            await executor.execute(
                Part.STEPS,
                build_steps_prompt(recipe, ingredients, request.prep_time),
                STEPS_SETTINGS,
            )

        await executor.execute(
            Part.INGREDIENTS,
            build_ingredients_prompt(recipe, request.ingredients_on_hand),
            INGREDIENTS_SETTINGS,
            on_complete=generate_steps,
        )

    async def _drain(self, channel: FragmentChannel, sink: FragmentSink) -> None:
        async for fragment in channel:
            await sink(fragment)

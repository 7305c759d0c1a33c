"""Value objects shared by the generation executor and orchestrator."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from pydantic_ai.settings import ModelSettings


class Part(StrEnum):
    """Short identifiers tagging each streamed sub-document.

    The values are part of the wire contract with existing clients, which
    route fragments to DOM elements by these ids.
    """

    ALTERNATES = "alt"
    INGREDIENTS = "add"
    STEPS = "ste"
    INTRO = "int"
    INGREDIENT_NOTES = "ing"
    SIDES = "sde"
    # Seed output is parsed, never relayed to the sink.
    SEED = "init"


@dataclass(frozen=True, slots=True)
class Fragment:
    """One incremental text delta tagged with the part it belongs to."""

    part: str
    content: str


@dataclass(frozen=True, slots=True)
class ExecutionSettings:
    """Sampling configuration for a single prompt execution."""

    max_tokens: int
    temperature: float
    top_p: float = 0.0
    model_override: str | None = None

    def to_model_settings(self) -> ModelSettings:
        return ModelSettings(
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
        )


FragmentSink = Callable[[Fragment], Awaitable[None]]


# Per-part sampling, tuned against llama-3 instruct models.
SEED_SETTINGS = ExecutionSettings(max_tokens=500, temperature=0.25)
INGREDIENTS_SETTINGS = ExecutionSettings(max_tokens=200, temperature=0.25)
INTRO_SETTINGS = ExecutionSettings(max_tokens=250, temperature=0.55)
INGREDIENT_NOTES_SETTINGS = ExecutionSettings(max_tokens=200, temperature=0.25)
STEPS_SETTINGS = ExecutionSettings(max_tokens=400, temperature=0.25)
SIDES_SETTINGS = ExecutionSettings(max_tokens=72, temperature=0.25)

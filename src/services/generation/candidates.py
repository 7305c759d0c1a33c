"""Seed output parsing and candidate selection."""

from __future__ import annotations

import random
from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from schemas.recipes import RecipeCandidate
from services.generation.exceptions import ContentFormatError, SelectionError


_candidates_adapter: TypeAdapter[list[RecipeCandidate]] = TypeAdapter(
    list[RecipeCandidate]
)


def parse_candidates(text: str) -> list[RecipeCandidate]:
    """Parse the seed output into recipe candidates.

    The seed prompt asks for a single-line JSON array of `{name, intro}`
    objects. Anything else, including truncated output, is rejected.

    Raises:
        ContentFormatError: the text is not a JSON array of candidates.
    """
    try:
        return _candidates_adapter.validate_json(text)
    except ValidationError as exc:
        raise ContentFormatError(
            f"Seed output is not a list of recipes ({exc.error_count()} error(s))"
        ) from exc


def select_candidate(
    candidates: Sequence[RecipeCandidate], rng: random.Random | None = None
) -> int:
    """Pick a candidate index uniformly over the candidates actually parsed.

    Raises:
        SelectionError: there is nothing to choose from.
    """
    if not candidates:
        raise SelectionError("Seed generation produced no recipe candidates")
    return (rng or random).randrange(len(candidates))

"""Recipe generation request and candidate schemas."""

from __future__ import annotations

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


class GenerationRequest(BaseModel):
    """Request payload for generating a recipe from on-hand ingredients."""

    ingredients_on_hand: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        validation_alias=AliasChoices("ingredientsOnHand", "ingredients_on_hand"),
        description="Free-text list of ingredients already in the pantry",
    )
    prep_time: str = Field(
        ...,
        min_length=1,
        max_length=32,
        validation_alias=AliasChoices("prepTime", "prepTimeMinutes", "prep_time"),
        description="Target preparation time in minutes",
    )

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    @field_validator("prep_time", mode="before")
    @classmethod
    def _coerce_prep_time(cls, v: object) -> object:
        # Clients send the <select> value, which may arrive as a number.
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v


class RecipeCandidate(BaseModel):
    """A candidate recipe proposed by the seed generation."""

    name: str = Field(..., min_length=1, description="The name of the recipe")
    intro: str = Field(default="", description="A sentence describing the recipe")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        """Match property names case-insensitively ("Name", "INTRO", ...)."""
        if isinstance(data, dict):
            return {
                key.lower() if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data


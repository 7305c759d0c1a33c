"""Prompt templates for each generated part.

Generated text marks line breaks with the LINE_BREAK sentinel instead of
newlines so every fragment fits on one SSE data line; clients translate one
sentinel to a newline and two to a paragraph break. The wording below is
tuned for llama-3 instruct models and is part of the client contract.
"""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

from schemas.recipes import RecipeCandidate


LINE_BREAK = "⮑"

_PERSONA = "You are a writer for America's Test Kitchen"


def build_seed_prompt(ingredients_on_hand: str, prep_time: str) -> str:
    return f"""{_PERSONA}
You have been given a list of ingredients and prep time
Your job is to think of 3 recipes that we can make with these ingredients within the prep time
Here is a list of ingredients we have already: {ingredients_on_hand}
These are just the ingredients we already have on hand
You can include recipes that have more ingredients
The ideal prep time is {prep_time} minutes or less; pick recipes that can be prepared in this time limit
WRITE ONLY THE JSON DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT
DO NOT WASTE TOKENS ON WHITESPACE WRITE THE JSON AS A SINGLE LINE
Write your output as JSON using the format:

[
 {{
   "name": "(the name of the recipe)",
   "intro": "(a sentence describing this recipe)"
 }},
]"""


def build_ingredients_prompt(recipe: RecipeCandidate, ingredients_on_hand: str) -> str:
    return f"""{_PERSONA}
We are making the recipe: {recipe.name}
Here is the description: {recipe.intro}
Here are the ingredients we already have: {ingredients_on_hand}
Write a list of the entire list of ingredients that we need
Write each ingredient followed by a "{LINE_BREAK}"
Example: 1/2 teaspoon salt{LINE_BREAK}
Write the entire list as a single line
WRITE ONLY THE LIST OF INGREDIENTS DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT"""


def build_intro_prompt(recipe: RecipeCandidate) -> str:
    return f"""{_PERSONA}
We are making the recipe: {recipe.name}
Here is the description: {recipe.intro}
Write a 3 to 5 sentence paragraph introducing the recipe
Write about topics like the origin of the recipe, the flavor profile, and best occasions for this recipe.
WRITE ONLY THE PARAGRAPH DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT"""


def build_ingredient_notes_prompt(ingredients_on_hand: str) -> str:
    return f"""{_PERSONA}
You are writing about the nutritional information about food
Here are some ingredients we are working with: {ingredients_on_hand}
Write each ingredient followed by a "{LINE_BREAK}"
Then write a short sentence about the ingredient focusing on nutritional information followed by two "{LINE_BREAK}"
Write your entire output as a single line
WRITE ONLY THE LIST OF INGREDIENTS DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT

EXAMPLE:
Bell peppers{LINE_BREAK}Bell peppers are high in vitamin C and add color, flavor, and texture to any dish.{LINE_BREAK}{LINE_BREAK}"""


def build_steps_prompt(recipe: RecipeCandidate, ingredients: str, prep_time: str) -> str:
    """Steps are written against the generated ingredient list, not the pantry."""
    return f"""{_PERSONA}
You are writing out the steps for the recipe: {recipe.name}
Here is the description of the recipe: {recipe.intro}
Our target prep time is {prep_time} minutes
Write each step starting with a number like "1."
End each step with "{LINE_BREAK}{LINE_BREAK}"
Write your entire output as a single line
WRITE ONLY THE RECIPE STEPS DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT
Here are the ingredients:

<INGREDIENTS>
{ingredients}
<END INGREDIENTS>"""


def build_sides_prompt(recipe: RecipeCandidate) -> str:
    return f"""{_PERSONA}
I am making this recipe as my main dish: {recipe.name}
Here is the description of the recipe: {recipe.intro}
Write a list of only 3 suggested side dishes to go with this recipe
Separate each suggestion with a comma
Example: French Fries, Cole Slaw, Baked Beans
WRITE ONLY THE SIDE DISHES DO NOT WRITE A PROLOGUE; JUST WRITE THE CONTENT"""


def render_alternates(
    candidates: Sequence[RecipeCandidate], selected_index: int
) -> str:
    """Render every candidate except the selected one as HTML list items.

    Exclusion is positional so a duplicate name elsewhere in the list is
    still offered as an alternate.
    """
    return "".join(
        f"<li><b>{escape(candidate.name)}</b> &nbsp;<i>{escape(candidate.intro)}</i></li>"
        for index, candidate in enumerate(candidates)
        if index != selected_index
    )

"""Tests for seed output parsing and candidate selection."""

from __future__ import annotations

import random

import pytest

from schemas.recipes import RecipeCandidate
from services.generation.candidates import parse_candidates, select_candidate
from services.generation.exceptions import ContentFormatError, SelectionError


class TestParseCandidates:
    def test_parses_single_line_json_array(self) -> None:
        text = (
            '[{"name": "Shakshuka", "intro": "Eggs poached in tomato."},'
            '{"name": "Frittata", "intro": "An open omelette."}]'
        )

        candidates = parse_candidates(text)

        assert [c.name for c in candidates] == ["Shakshuka", "Frittata"]
        assert candidates[0].intro == "Eggs poached in tomato."

    def test_property_names_are_case_insensitive(self) -> None:
        candidates = parse_candidates('[{"Name": "Congee", "INTRO": "Rice porridge."}]')

        assert candidates == [RecipeCandidate(name="Congee", intro="Rice porridge.")]

    def test_missing_intro_defaults_to_empty(self) -> None:
        assert parse_candidates('[{"name": "Toast"}]')[0].intro == ""

    def test_unknown_properties_are_ignored(self) -> None:
        candidates = parse_candidates('[{"name": "Toast", "calories": 120}]')

        assert candidates[0].name == "Toast"

    def test_empty_array_parses(self) -> None:
        assert parse_candidates("[]") == []

    @pytest.mark.parametrize(
        "text",
        [
            '[{"name": "Shakshuka", "intro": "Eggs poa',
            "Sure! Here are three recipes: ...",
            '{"name": "Shakshuka"}',
            '[{"intro": "no name"}]',
            '[{"name": ""}]',
            "",
        ],
        ids=["truncated", "prose", "object", "missing-name", "empty-name", "empty"],
    )
    def test_rejects_malformed_output(self, text: str) -> None:
        with pytest.raises(ContentFormatError) as excinfo:
            parse_candidates(text)

        assert excinfo.value.error_code == "invalid_content"


class TestSelectCandidate:
    def test_empty_list_raises(self) -> None:
        with pytest.raises(SelectionError):
            select_candidate([])

    def test_single_candidate_is_always_selected(self) -> None:
        candidates = [RecipeCandidate(name="Only")]

        assert {select_candidate(candidates) for _ in range(20)} == {0}

    @pytest.mark.parametrize("count", [1, 2, 3, 5])
    def test_index_stays_within_parsed_candidates(self, count: int) -> None:
        candidates = [RecipeCandidate(name=f"Recipe {i}") for i in range(count)]
        rng = random.Random(1234)

        picks = {select_candidate(candidates, rng) for _ in range(200)}

        assert picks == set(range(count))

"""Tests for the streaming generate endpoint."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from fixtures.generation_fixtures import (
    FixedChoice,
    PartScript,
    ScriptedCompletionProvider,
)

from api.v1.generate import stream_recipe
from main import app
from services.generation.model_factory import get_recipe_generator
from services.generation.models import Part
from services.generation.orchestrator import GeneratorConfig, RecipeGenerator


PAYLOAD = {"ingredientsOnHand": "rice, eggs, scallions", "prepTime": "20"}


def _override_generator(
    generator_config: GeneratorConfig,
    scripts: dict[Part, PartScript] | None = None,
) -> ScriptedCompletionProvider:
    provider = ScriptedCompletionProvider(scripts)
    generator = RecipeGenerator(provider, generator_config, rng=FixedChoice(0))
    app.dependency_overrides[get_recipe_generator] = lambda: generator
    return provider


def _parse_events(body: str) -> list[tuple[str, str]]:
    """Split an SSE body into (event, data) pairs; default event is "message"."""
    events = []
    for block in body.split("\n\n"):
        if not block:
            continue
        event, data = "message", ""
        for line in block.split("\n"):
            if line.startswith("event: "):
                event = line[len("event: ") :]
            elif line.startswith("data: "):
                data = line[len("data: ") :]
        events.append((event, data))
    return events


def _fragments(body: str) -> list[tuple[str, str]]:
    return [
        tuple(data.split("|", 1))  # type: ignore[misc]
        for event, data in _parse_events(body)
        if event == "message"
    ]


class TestGenerateEndpoint:
    def test_streams_fragments_as_sse(
        self, client: TestClient, generator_config: GeneratorConfig
    ) -> None:
        _override_generator(generator_config)

        response = client.post("/api/v1/generate", json=PAYLOAD)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        fragments = _fragments(response.text)
        assert fragments[0][0] == "alt"
        assert {part for part, _ in fragments} == {
            "alt",
            "add",
            "ste",
            "int",
            "ing",
            "sde",
        }
        sides = "".join(content for part, content in fragments if part == "sde")
        assert sides == "Miso soup, Pickles, Greens"

    def test_alternates_markup_is_sent_verbatim(
        self, client: TestClient, generator_config: GeneratorConfig
    ) -> None:
        _override_generator(generator_config)

        response = client.post("/api/v1/generate", json=PAYLOAD)

        alt = dict(_fragments(response.text))["alt"]
        assert alt == (
            "<li><b>Beta Bake</b> &nbsp;<i>A cheesy bake.</i></li>"
            "<li><b>Gamma Salad</b> &nbsp;<i>A crisp salad.</i></li>"
        )

    def test_seed_failure_returns_json_error(
        self, client: TestClient, generator_config: GeneratorConfig
    ) -> None:
        provider = _override_generator(
            generator_config, {Part.SEED: PartScript(deltas=["not json"])}
        )

        response = client.post("/api/v1/generate", json=PAYLOAD)

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["error"]["type"] == "invalid_content"
        assert "correlation_id" in body["error"]
        assert len(provider.calls) == 1

    def test_mid_stream_failure_ends_with_error_event(
        self, client: TestClient, generator_config: GeneratorConfig
    ) -> None:
        _override_generator(
            generator_config,
            {Part.INTRO: PartScript(deltas=["Once "], delay=0.05, error=RuntimeError())},
        )

        response = client.post("/api/v1/generate", json=PAYLOAD)

        assert response.status_code == 200
        events = _parse_events(response.text)
        assert events[-1] == ("error", "provider_failed")
        assert ("message", "int|Once ") in events
        assert all(event == "message" for event, _ in events[:-1])

    @pytest.mark.parametrize(
        "payload",
        [
            {"prepTime": "20"},
            {"ingredientsOnHand": "", "prepTime": "20"},
            {"ingredientsOnHand": "rice"},
        ],
    )
    def test_invalid_request_is_rejected(
        self, client: TestClient, generator_config: GeneratorConfig, payload: dict
    ) -> None:
        provider = _override_generator(generator_config)

        response = client.post("/api/v1/generate", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"
        assert provider.calls == []

    def test_response_carries_correlation_id(
        self, client: TestClient, generator_config: GeneratorConfig
    ) -> None:
        _override_generator(generator_config)

        response = client.post(
            "/api/v1/generate",
            json=PAYLOAD,
            headers={"X-Correlation-ID": "req-123"},
        )

        assert response.headers["X-Correlation-ID"] == "req-123"


@pytest.mark.asyncio
async def test_generate_with_async_client(async_client, generator_config) -> None:
    _override_generator(generator_config)

    response = await async_client.post("/api/v1/generate", json=PAYLOAD)

    assert response.status_code == 200
    assert "data: alt|" in response.text


def test_legacy_generate_path_streams(
    client: TestClient, generator_config: GeneratorConfig
) -> None:
    _override_generator(generator_config)

    response = client.post("/generate", json=PAYLOAD)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert "ste" in {part for part, _ in _fragments(response.text)}


@pytest.mark.asyncio
async def test_closing_the_stream_cancels_generation(
    generator_config: GeneratorConfig, generation_request
) -> None:
    provider = ScriptedCompletionProvider(
        {Part.INTRO: PartScript(deltas=["Once "], hang=True)}
    )
    generator = RecipeGenerator(provider, generator_config, rng=FixedChoice(0))
    stream = stream_recipe(generator, generation_request)

    async with asyncio.timeout(1):
        first = await anext(stream)
        async for event in stream:
            if event == "data: int|Once \n\n":
                break
        await stream.aclose()

    assert first.startswith("data: alt|")
    assert ("cancelled", Part.INTRO) in provider.events

"""Shared test fixtures for pytest.

We set minimal env defaults early so importing modules that instantiate
settings (main, the model factory) succeeds without an external .env file
and without provider credentials.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ.setdefault("ENVIRONMENT", "test")

import pydantic_ai.models  # noqa: E402

from main import app  # noqa: E402


# Unit tests must never reach a real LLM endpoint.
pydantic_ai.models.ALLOW_MODEL_REQUESTS = False

pytest_plugins = ("fixtures.generation_fixtures",)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.
    """
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture(autouse=True)
def _clear_dependency_overrides() -> Generator[None, None, None]:
    yield
    app.dependency_overrides.clear()

"""Collaborator protocols for the generation pipeline.

The orchestrator depends only on these protocols so concrete LLM backends
(and their transport quirks) stay outside the fan-out logic.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from services.generation.models import ExecutionSettings


class CompletionProvider(Protocol):
    """Protocol for streaming text completion backends."""

    def stream(
        self, model_id: str, prompt: str, settings: ExecutionSettings
    ) -> AsyncIterator[str]:
        """Return a finite, non-restartable async iterator of text deltas.

        Cancelling the consuming task must abort the underlying request.
        """
        ...

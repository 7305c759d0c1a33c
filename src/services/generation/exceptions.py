"""Domain exceptions for the recipe generation pipeline.

Each exception carries a stable `error_code` so the API layer can map it to
an SSE terminal event or an HTTP error body without string matching.
Cancellation is not modelled here: callers observe `asyncio.CancelledError`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, eq=False)
class GenerationError(Exception):
    """Base class for recipe generation domain errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class ProviderError(GenerationError):
    """The completion provider failed or was unreachable for one part."""

    def __init__(
        self, message: str = "Completion provider call failed", part: str | None = None
    ) -> None:
        super().__init__(message=message, error_code="provider_failed")
        self.part = part


class ContentFormatError(GenerationError):
    def __init__(
        self, message: str = "Generated content did not match the expected format"
    ) -> None:
        super().__init__(message=message, error_code="invalid_content")


class SelectionError(GenerationError):
    def __init__(self, message: str = "No recipe candidate available") -> None:
        super().__init__(message=message, error_code="selection_failed")


class ChannelClosedError(GenerationError):
    def __init__(self, message: str = "Fragment channel is closed") -> None:
        super().__init__(message=message, error_code="channel_closed")

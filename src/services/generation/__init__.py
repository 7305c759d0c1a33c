"""Streaming recipe generation: seed, fan-out, and fragment multiplexing."""

from .exceptions import (
    ChannelClosedError,
    ContentFormatError,
    GenerationError,
    ProviderError,
    SelectionError,
)
from .models import ExecutionSettings, Fragment, Part


__all__ = [
    "ChannelClosedError",
    "ContentFormatError",
    "ExecutionSettings",
    "Fragment",
    "GenerationError",
    "Part",
    "ProviderError",
    "SelectionError",
]

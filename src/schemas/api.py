"""API response envelopes.

JSON endpoints (health, error bodies) share these wrappers; the generate
endpoint streams Server-Sent Events instead and only uses `ErrorResponse`
when a request fails before the stream starts.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper.

    Attributes:
        success: Whether the request was successful.
        data: The actual response data (when success is True).
        message: A human-readable message about the response.
        error: Error details (when success is False).
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"
    error: dict[str, Any] | None = None


class ErrorResponse(ApiResponse[None]):
    """Error envelope; `error` always carries `correlation_id` and `type`."""

    success: bool = False
    message: str = "An error occurred"
    error: dict[str, Any] | None = None
